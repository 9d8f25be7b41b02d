# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Configuration — one named bundle of header settings and its rendered cache.

A configuration is built by a builder callable, validated, compiled into
``cached_headers`` and frozen. Frozen instances reject every write; derived
configurations start from :meth:`Configuration.dup`.

Usage::

    def build(config: Configuration) -> None:
        config.hsts = {"max_age": 100}
        config.csp = {"default_src": ["'self'"]}

    config = Configuration(build)
    config.validate_config()
    config.cache_headers()
    config.freeze()
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from types import MappingProxyType, ModuleType
from typing import Any

import structlog

from secureheaders.headers import ALL_HEADER_KINDS, ALL_HEADERS_BESIDES_CSP, HEADER_KINDS_BY_KEY
from secureheaders.headers import content_security_policy as csp_header
from secureheaders.headers import public_key_pins, x_frame_options
from secureheaders.headers.base import OPT_OUT
from secureheaders.headers.content_security_policy import Policy
from secureheaders.kernel.exceptions import (
    ConfigurationError,
    FrozenConfigurationError,
    IllegalPolicyModificationError,
)
from secureheaders.useragent import FAMILIES, UserAgent, parse

logger = structlog.get_logger("secureheaders.configuration")

Builder = Callable[["Configuration"], Any]


class _HeaderSetting:
    """Attribute backed by the per-kind settings map."""

    def __init__(self, kind: ModuleType) -> None:
        self._key: str = kind.CONFIG_KEY

    def __get__(self, instance: Configuration | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return instance._settings[self._key]

    def __set__(self, instance: Configuration, value: Any) -> None:
        instance._settings[self._key] = value


def _is_policy(value: Any) -> bool:
    return value is not None and value is not OPT_OUT


class Configuration:
    """Per-header settings plus the precomputed header cache.

    Lifecycle: building (mutable) -> validated -> compiled and frozen.
    There is no way back from frozen; use :meth:`dup` for a mutable copy.
    """

    hsts = _HeaderSetting(HEADER_KINDS_BY_KEY["hsts"])
    x_frame_options = _HeaderSetting(HEADER_KINDS_BY_KEY["x_frame_options"])
    x_content_type_options = _HeaderSetting(HEADER_KINDS_BY_KEY["x_content_type_options"])
    x_xss_protection = _HeaderSetting(HEADER_KINDS_BY_KEY["x_xss_protection"])
    x_download_options = _HeaderSetting(HEADER_KINDS_BY_KEY["x_download_options"])
    x_permitted_cross_domain_policies = _HeaderSetting(HEADER_KINDS_BY_KEY["x_permitted_cross_domain_policies"])
    hpkp = _HeaderSetting(HEADER_KINDS_BY_KEY["hpkp"])

    def __init__(self, builder: Builder | None = None) -> None:
        object.__setattr__(self, "_frozen", False)
        self._settings: dict[str, Any] = {kind.CONFIG_KEY: kind.DEFAULT_VALUE for kind in ALL_HEADERS_BESIDES_CSP}
        self._settings[public_key_pins.CONFIG_KEY] = OPT_OUT
        self._settings[csp_header.CONFIG_KEY] = csp_header.default_policy()
        self._dynamic_csp: Policy | Any = None
        self._cached_headers: dict[str, Any] = {}
        self.secure_cookies: bool | None = None
        if builder is not None:
            builder(self)

    def __setattr__(self, name: str, value: Any) -> None:
        if self.__dict__.get("_frozen", False):
            raise FrozenConfigurationError(
                f"Cannot set {name!r}: configuration is frozen. Use an override instead.",
                context={"attribute": name},
            )
        super().__setattr__(name, value)

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "building"
        return f"<Configuration {state} headers={sorted(self._cached_headers)}>"

    # -- CSP -----------------------------------------------------------------

    @property
    def csp(self) -> Policy | Any:
        return self._settings[csp_header.CONFIG_KEY]

    @csp.setter
    def csp(self, value: Policy | Mapping[str, Any] | Any) -> None:
        if _is_policy(self._dynamic_csp):
            raise IllegalPolicyModificationError(
                "You are attempting to modify CSP settings directly. Use dynamic_csp instead.",
            )
        self._settings[csp_header.CONFIG_KEY] = _coerce_policy(value)

    @property
    def dynamic_csp(self) -> Policy | Any:
        return self._dynamic_csp

    @dynamic_csp.setter
    def dynamic_csp(self, value: Policy | Mapping[str, Any] | Any) -> None:
        self._dynamic_csp = _coerce_policy(value)

    def current_csp(self) -> Policy | Any:
        """The dynamic policy when one is set, else the static one."""
        return self._dynamic_csp if self._dynamic_csp is not None else self.csp

    # -- cache ---------------------------------------------------------------

    @property
    def cached_headers(self) -> Mapping[str, Any]:
        return self._cached_headers

    @property
    def frozen(self) -> bool:
        return self._frozen

    def validate_config(self) -> None:
        """Run every header validator; raises a ConfigurationError subclass."""
        for kind in ALL_HEADER_KINDS:
            kind.validate(self._settings[kind.CONFIG_KEY])
        if _is_policy(self._dynamic_csp):
            csp_header.validate(self._dynamic_csp)

    def cache_headers(self) -> Mapping[str, Any]:
        """Render every enabled header once and store the result."""
        self._ensure_mutable("cached_headers")
        headers: dict[str, Any] = {}
        for kind in ALL_HEADERS_BESIDES_CSP:
            value = self._settings[kind.CONFIG_KEY]
            if value is None:
                value = kind.DEFAULT_VALUE
            if value is not OPT_OUT:
                headers[kind.HEADER_NAME] = kind.make_header(value)
        self._generate_csp_headers(headers)
        self._cached_headers = headers
        return headers

    def freeze(self) -> Configuration:
        """Make this configuration and its cache read-only."""
        self._cached_headers = MappingProxyType(
            {
                name: MappingProxyType(dict(entry)) if isinstance(entry, Mapping) else entry
                for name, entry in self._cached_headers.items()
            }
        )
        object.__setattr__(self, "_frozen", True)
        return self

    def dup(self) -> Configuration:
        """Return an unfrozen deep copy; nothing is shared with ``self``."""
        duplicate = Configuration()
        duplicate._settings = {key: copy.deepcopy(value) for key, value in self._settings.items()}
        duplicate._dynamic_csp = copy.deepcopy(self._dynamic_csp)
        duplicate.secure_cookies = self.secure_cookies
        duplicate._cached_headers = {
            name: dict(entry) if isinstance(entry, Mapping) else entry
            for name, entry in self._cached_headers.items()
        }
        return duplicate

    def opt_out(self, header: str) -> None:
        """Stop sending ``header`` (a config key such as ``"hsts"``)."""
        kind = HEADER_KINDS_BY_KEY.get(header)
        if kind is None:
            raise ConfigurationError(f"Unknown header config key {header!r}", context={"config_key": header})
        self._ensure_mutable(header)
        if kind is csp_header:
            self.dynamic_csp = OPT_OUT
            self.csp = OPT_OUT
        else:
            setattr(self, header, OPT_OUT)
        self._cached_headers.pop(kind.HEADER_NAME, None)

    def update_x_frame_options(self, value: str) -> None:
        x_frame_options.validate(value)
        self.x_frame_options = value
        self._cached_headers[x_frame_options.HEADER_NAME] = x_frame_options.make_header(value)

    def rebuild_csp_header_cache(self, user_agent: str | UserAgent | None) -> None:
        """Re-render the CSP entry for one concrete user agent only."""
        self._ensure_mutable("cached_headers")
        entry: dict[str, tuple[str, str]] = {}
        self._cached_headers[csp_header.HEADER_NAME] = entry
        current = self.current_csp()
        if current is not OPT_OUT:
            user_agent = parse(user_agent)
            variation = csp_header.ua_to_variation(user_agent)
            entry[variation] = csp_header.make_header(current, user_agent)
            logger.debug("csp_cache_rebuilt", variation=variation, browser=user_agent.browser)

    def header_hash(self, user_agent: str | UserAgent | None = None) -> dict[str, str]:
        """Header name/value pairs to send to ``user_agent``."""
        headers: dict[str, str] = {}
        for key, entry in self._cached_headers.items():
            if key == csp_header.HEADER_NAME:
                user_agent = parse(user_agent)
                rendered = entry.get(csp_header.ua_to_variation(user_agent))
                if rendered is None:
                    current = self.current_csp()
                    if current is OPT_OUT:
                        continue
                    rendered = csp_header.make_header(current, user_agent)
            else:
                rendered = entry
            name, value = rendered
            headers[name] = value
        return headers

    # -- internals -----------------------------------------------------------

    def _generate_csp_headers(self, headers: dict[str, Any]) -> None:
        current = self.current_csp()
        if current is OPT_OUT:
            return
        headers[csp_header.HEADER_NAME] = {
            family: csp_header.make_header(current, UserAgent.for_family(family)) for family in FAMILIES
        }

    def _ensure_mutable(self, what: str) -> None:
        if self._frozen:
            raise FrozenConfigurationError(
                f"Cannot modify {what!r}: configuration is frozen. Use an override instead.",
                context={"attribute": what},
            )


def _coerce_policy(value: Any) -> Any:
    if isinstance(value, (Policy, Mapping)):
        return Policy.from_value(value)
    return value

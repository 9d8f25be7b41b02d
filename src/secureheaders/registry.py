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
"""ConfigurationRegistry — named, frozen configurations populated at start-up.

Writes (``default``/``define``/``override``) are meant for single-threaded
application start-up and are not synchronised. Reads are lock-free because
every registered configuration is frozen.

Usage::

    registry = ConfigurationRegistry()
    registry.configure(lambda c: setattr(c, "hsts", {"max_age": 100}))
    registry.override("api", builder=lambda c: c.opt_out("csp"))

    registry.get("api").cached_headers
"""

from __future__ import annotations

from typing import Any

import structlog

from secureheaders.configuration import Builder, Configuration
from secureheaders.headers import ALL_HEADER_KINDS
from secureheaders.headers.base import OPT_OUT
from secureheaders.kernel.exceptions import (
    ConfigurationError,
    DuplicateConfigurationError,
    NotYetConfiguredError,
)

logger = structlog.get_logger("secureheaders.registry")

DEFAULT_CONFIG = "default"
NOOP_CONFIGURATION = "secure_headers_noop_config"


class ConfigurationRegistry:
    """Maps configuration names to frozen :class:`Configuration` objects.

    ``script_hashes`` holds the ``{script: hash or [hashes]}`` mapping loaded at
    boot. Applications read it to build ``script_src`` hash sources, e.g.
    ``request.append_content_security_policy_directives({"script_src":
    registry.script_hashes["app/index.html"]})``.
    """

    def __init__(self) -> None:
        self._configurations: dict[str, Configuration] | None = None
        self.script_hashes: dict[str, Any] = {}

    def default(self, builder: Builder | None = None) -> Configuration:
        """Create (or replace) the default configuration and the noop one."""
        config = Configuration(builder)
        self._publish({NOOP_CONFIGURATION: self._noop_configuration(), DEFAULT_CONFIG: config})
        return config

    configure = default

    def define(self, name: str, builder: Builder | None = None) -> Configuration:
        """Register a configuration built from library defaults.

        The first registration on an empty registry also adds the noop
        configuration.
        """
        self._ensure_new(name)
        config = Configuration(builder)
        pending: dict[str, Configuration] = {}
        if self._configurations is None:
            pending[NOOP_CONFIGURATION] = self._noop_configuration()
        pending[name] = config
        self._publish(pending)
        return config

    def override(self, name: str, base: str = DEFAULT_CONFIG, builder: Builder | None = None) -> Configuration:
        """Register a deep copy of ``base`` with ``builder`` applied."""
        base_config = self.get(base)
        if base_config is None:
            raise NotYetConfiguredError(f"{base} policy not yet supplied", context={"base": base})
        self._ensure_new(name)
        config = base_config.dup()
        if builder is not None:
            builder(config)
        self._publish({name: config})
        logger.debug("configuration_overridden", name=name, base=base)
        return config

    def get(self, name: str = DEFAULT_CONFIG) -> Configuration | None:
        """Return the named configuration, or None if that name is unknown.

        Raises NotYetConfiguredError when nothing was ever registered.
        """
        if self._configurations is None:
            raise NotYetConfiguredError("Default policy not yet supplied")
        return self._configurations.get(name)

    def names(self) -> list[str]:
        return list(self._configurations or {})

    def __contains__(self, name: object) -> bool:
        return self._configurations is not None and name in self._configurations

    def _ensure_new(self, name: str) -> None:
        if name in self:
            raise DuplicateConfigurationError(
                f"A configuration named {name!r} is already registered",
                context={"name": name},
            )

    def _publish(self, pending: dict[str, Configuration]) -> None:
        # Validate and compile everything before touching the map so a
        # failure leaves the registry exactly as it was.
        for name, config in pending.items():
            try:
                config.validate_config()
            except ConfigurationError as exc:
                logger.debug("configuration_invalid", name=name, error=str(exc))
                raise
            config.cache_headers()
            config.freeze()

        if self._configurations is None:
            self._configurations = {}
        self._configurations.update(pending)
        for name, config in pending.items():
            logger.info("configuration_registered", name=name, headers=sorted(config.cached_headers))

    @staticmethod
    def _noop_configuration() -> Configuration:
        def opt_out_of_everything(config: Configuration) -> None:
            for kind in ALL_HEADER_KINDS:
                config.opt_out(kind.CONFIG_KEY)
            config.dynamic_csp = OPT_OUT

        return Configuration(opt_out_of_everything)


# =============================================================================
# Process-wide registry
# =============================================================================

_registry = ConfigurationRegistry()


def get_registry() -> ConfigurationRegistry:
    return _registry


def configure(builder: Builder | None = None) -> Configuration:
    return _registry.configure(builder)


def default(builder: Builder | None = None) -> Configuration:
    return _registry.default(builder)


def define(name: str, builder: Builder | None = None) -> Configuration:
    return _registry.define(name, builder)


def override(name: str, base: str = DEFAULT_CONFIG, builder: Builder | None = None) -> Configuration:
    return _registry.override(name, base, builder)


def get(name: str = DEFAULT_CONFIG) -> Configuration | None:
    return _registry.get(name)

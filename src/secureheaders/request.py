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
"""Per-request header selection and request-scoped overrides.

A :class:`RequestPolicy` lives for one request. It reads the registered,
frozen configuration until the first request-specific change, then works on
a private copy so the shared configuration is never touched.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from secureheaders.configuration import Configuration
from secureheaders.headers import content_security_policy as csp_header
from secureheaders.headers.base import OPT_OUT
from secureheaders.headers.content_security_policy import Policy, default_policy
from secureheaders.kernel.exceptions import NotYetConfiguredError
from secureheaders.registry import DEFAULT_CONFIG, NOOP_CONFIGURATION, ConfigurationRegistry, get_registry
from secureheaders.useragent import UserAgent


class RequestPolicy:
    """Headers for a single request, with optional per-request overrides."""

    def __init__(self, registry: ConfigurationRegistry | None = None, name: str = DEFAULT_CONFIG) -> None:
        self._registry = registry if registry is not None else get_registry()
        self._name = name
        self._private: Configuration | None = None
        self._lookup(name)

    @property
    def name(self) -> str:
        return self._name

    @property
    def config(self) -> Configuration:
        """The request's private copy if one exists, else the registered config."""
        if self._private is not None:
            return self._private
        return self._lookup(self._name)

    @property
    def secure_cookies(self) -> bool | None:
        return self.config.secure_cookies

    def use_override(self, name: str) -> None:
        """Switch to another registered configuration, dropping local changes."""
        self._lookup(name)
        self._name = name
        self._private = None

    def override_content_security_policy_directives(self, directives: Mapping[str, Any]) -> None:
        """Replace the given directives for this request only."""
        config = self._copy()
        config.dynamic_csp = _validated(self._base_policy(config).merge(directives))

    def append_content_security_policy_directives(self, directives: Mapping[str, Any]) -> None:
        """Add sources to the given directives for this request only."""
        config = self._copy()
        config.dynamic_csp = _validated(self._base_policy(config).append(directives))

    def override_x_frame_options(self, value: str) -> None:
        self._copy().update_x_frame_options(value)

    def opt_out_of_header(self, header: str) -> None:
        self._copy().opt_out(header)

    def opt_out_of_all_headers(self) -> None:
        self.use_override(NOOP_CONFIGURATION)

    def header_hash(self, user_agent: str | UserAgent | None = None) -> dict[str, str]:
        """Header name/value pairs to attach to the response."""
        config = self.config
        dynamic = config.dynamic_csp
        if self._private is not None and dynamic is not None and dynamic is not OPT_OUT:
            config.rebuild_csp_header_cache(user_agent)
        return config.header_hash(user_agent)

    def _lookup(self, name: str) -> Configuration:
        config = self._registry.get(name)
        if config is None:
            raise NotYetConfiguredError(f"{name} policy not yet supplied", context={"name": name})
        return config

    def _copy(self) -> Configuration:
        if self._private is None:
            self._private = self._lookup(self._name).dup()
        return self._private

    @staticmethod
    def _base_policy(config: Configuration) -> Policy:
        current = config.current_csp()
        if current is None:
            return default_policy()
        if current is OPT_OUT:
            return Policy()
        return current


def _validated(policy: Policy) -> Policy:
    csp_header.validate(policy)
    return policy


def header_hash_for(
    user_agent: str | UserAgent | None = None,
    name: str = DEFAULT_CONFIG,
    registry: ConfigurationRegistry | None = None,
) -> dict[str, str]:
    """Headers for a request that uses a registered configuration unchanged."""
    return RequestPolicy(registry, name).header_hash(user_agent)

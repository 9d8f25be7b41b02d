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
"""Unified exception hierarchy for secureheaders.

All library exceptions inherit from SecureHeadersException so callers can
catch one type at start-up. Every error here is raised while configurations
are being registered; nothing is raised on the request path.

Categories:
- ConfigurationError: malformed header settings, one subclass per header kind
- NotYetConfiguredError: lookups before the registry or a base config exists
- IllegalPolicyModificationError: direct CSP writes while a dynamic CSP is set
- FrozenConfigurationError: writes to an already registered configuration
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class SecureHeadersException(Exception):
    """Base exception for all secureheaders errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CONFIG_INVALID").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(SecureHeadersException):
    """A header setting failed validation."""

    def __init__(self, message: str, code: str | None = "CONFIG_INVALID", context: dict | None = None) -> None:
        super().__init__(message, code=code, context=context)


class DuplicateConfigurationError(ConfigurationError):
    """A configuration with the same name is already registered."""


class StrictTransportSecurityConfigError(ConfigurationError):
    """Invalid Strict-Transport-Security setting."""


class ContentSecurityPolicyConfigError(ConfigurationError):
    """Invalid Content-Security-Policy setting."""


class XFrameOptionsConfigError(ConfigurationError):
    """Invalid X-Frame-Options setting."""


class XContentTypeOptionsConfigError(ConfigurationError):
    """Invalid X-Content-Type-Options setting."""


class XXssProtectionConfigError(ConfigurationError):
    """Invalid X-XSS-Protection setting."""


class XDownloadOptionsConfigError(ConfigurationError):
    """Invalid X-Download-Options setting."""


class XPermittedCrossDomainPoliciesConfigError(ConfigurationError):
    """Invalid X-Permitted-Cross-Domain-Policies setting."""


class PublicKeyPinsConfigError(ConfigurationError):
    """Invalid Public-Key-Pins setting."""


# =============================================================================
# Lifecycle Errors
# =============================================================================


class NotYetConfiguredError(SecureHeadersException):
    """The registry, or the named base configuration, has not been set up yet."""

    def __init__(self, message: str, context: dict | None = None) -> None:
        super().__init__(message, code="NOT_CONFIGURED", context=context)


class IllegalPolicyModificationError(SecureHeadersException):
    """Attempt to assign ``csp`` directly while ``dynamic_csp`` is active."""

    def __init__(self, message: str, context: dict | None = None) -> None:
        super().__init__(message, code="ILLEGAL_POLICY_MODIFICATION", context=context)


class FrozenConfigurationError(SecureHeadersException):
    """Attempt to mutate a configuration after it was registered."""

    def __init__(self, message: str, context: dict | None = None) -> None:
        super().__init__(message, code="CONFIG_FROZEN", context=context)

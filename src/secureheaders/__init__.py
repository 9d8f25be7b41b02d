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
"""secureheaders — precompiled security response headers with per-browser CSP.

Configure once at start-up, read the cached headers per request::

    import secureheaders

    def build(config):
        config.hsts = {"max_age": 31536000, "include_subdomains": True}
        config.csp = {"default_src": ["'self'"], "script_src": ["'self'", "cdn.example.com"]}

    secureheaders.configure(build)
    secureheaders.override("embeddable", builder=lambda c: c.opt_out("x_frame_options"))

    headers = secureheaders.header_hash_for(request_user_agent, "embeddable")
"""

__version__ = "0.1.0"

from secureheaders.configuration import Configuration
from secureheaders.headers import OPT_OUT, Policy
from secureheaders.kernel.exceptions import (
    ConfigurationError,
    FrozenConfigurationError,
    IllegalPolicyModificationError,
    NotYetConfiguredError,
    SecureHeadersException,
)
from secureheaders.registry import (
    DEFAULT_CONFIG,
    NOOP_CONFIGURATION,
    ConfigurationRegistry,
    configure,
    default,
    define,
    get,
    get_registry,
    override,
)
from secureheaders.request import RequestPolicy, header_hash_for

__all__ = [
    "DEFAULT_CONFIG",
    "NOOP_CONFIGURATION",
    "OPT_OUT",
    "Configuration",
    "ConfigurationError",
    "ConfigurationRegistry",
    "FrozenConfigurationError",
    "IllegalPolicyModificationError",
    "NotYetConfiguredError",
    "Policy",
    "RequestPolicy",
    "SecureHeadersException",
    "__version__",
    "configure",
    "default",
    "define",
    "get",
    "get_registry",
    "header_hash_for",
    "override",
]

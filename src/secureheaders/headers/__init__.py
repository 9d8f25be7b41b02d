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
"""Header kinds — one module per response header, plus the opt-out sentinel."""

from types import ModuleType

from secureheaders.headers import (
    content_security_policy,
    public_key_pins,
    strict_transport_security,
    x_content_type_options,
    x_download_options,
    x_frame_options,
    x_permitted_cross_domain_policies,
    x_xss_protection,
)
from secureheaders.headers.base import OPT_OUT, HeaderKind, OptOut
from secureheaders.headers.content_security_policy import Policy

# Fixed validation order.
ALL_HEADER_KINDS: tuple[ModuleType, ...] = (
    strict_transport_security,
    content_security_policy,
    x_frame_options,
    x_content_type_options,
    x_xss_protection,
    x_download_options,
    x_permitted_cross_domain_policies,
    public_key_pins,
)

ALL_HEADERS_BESIDES_CSP: tuple[ModuleType, ...] = tuple(
    kind for kind in ALL_HEADER_KINDS if kind is not content_security_policy
)

HEADER_KINDS_BY_KEY: dict[str, ModuleType] = {kind.CONFIG_KEY: kind for kind in ALL_HEADER_KINDS}

__all__ = [
    "ALL_HEADERS_BESIDES_CSP",
    "ALL_HEADER_KINDS",
    "HEADER_KINDS_BY_KEY",
    "OPT_OUT",
    "HeaderKind",
    "OptOut",
    "Policy",
]

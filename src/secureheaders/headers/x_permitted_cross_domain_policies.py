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
"""X-Permitted-Cross-Domain-Policies header (Flash/PDF cross-domain policy files)."""

from __future__ import annotations

from typing import Any

from secureheaders.headers.base import OPT_OUT
from secureheaders.kernel.exceptions import XPermittedCrossDomainPoliciesConfigError

CONFIG_KEY = "x_permitted_cross_domain_policies"
HEADER_NAME = "X-Permitted-Cross-Domain-Policies"
DEFAULT_VALUE = "none"
VALID_POLICIES = ("all", "none", "master-only", "by-content-type", "by-ftp-filename")


def validate(value: Any) -> None:
    if value is None or value is OPT_OUT:
        return
    if not isinstance(value, str) or value.lower() not in VALID_POLICIES:
        raise XPermittedCrossDomainPoliciesConfigError(
            f"Value must be one of {', '.join(VALID_POLICIES)}, got {value!r}",
            context={"config_key": CONFIG_KEY},
        )


def make_header(value: Any = None) -> tuple[str, str]:
    return HEADER_NAME, value if value is not None else DEFAULT_VALUE

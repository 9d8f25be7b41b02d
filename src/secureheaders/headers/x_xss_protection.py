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
"""X-XSS-Protection header."""

from __future__ import annotations

import re
from typing import Any

from secureheaders.headers.base import OPT_OUT
from secureheaders.kernel.exceptions import XXssProtectionConfigError

CONFIG_KEY = "x_xss_protection"
HEADER_NAME = "X-XSS-Protection"
DEFAULT_VALUE = "1; mode=block"

VALID_X_XSS_HEADER = re.compile(r"\A[01](; mode=block)?(; report=\S+)?\Z", re.IGNORECASE)


def validate(value: Any) -> None:
    if value is None or value is OPT_OUT:
        return
    if not isinstance(value, str):
        raise XXssProtectionConfigError(
            f"Value must be a string, got {type(value).__name__}",
            context={"config_key": CONFIG_KEY},
        )
    if not VALID_X_XSS_HEADER.match(value):
        raise XXssProtectionConfigError(
            f"Invalid format (see VALID_X_XSS_HEADER): {value!r}",
            context={"config_key": CONFIG_KEY},
        )
    # Directives only make sense when the filter is switched on.
    if value.startswith("0") and ("mode=" in value or "report=" in value):
        raise XXssProtectionConfigError(
            "mode= and report= are only valid with a value of 1",
            context={"config_key": CONFIG_KEY},
        )


def make_header(value: Any = None) -> tuple[str, str]:
    return HEADER_NAME, value if value is not None else DEFAULT_VALUE

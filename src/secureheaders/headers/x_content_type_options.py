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
"""X-Content-Type-Options header."""

from __future__ import annotations

from typing import Any

from secureheaders.headers.base import OPT_OUT
from secureheaders.kernel.exceptions import XContentTypeOptionsConfigError

CONFIG_KEY = "x_content_type_options"
HEADER_NAME = "X-Content-Type-Options"
DEFAULT_VALUE = "nosniff"


def validate(value: Any) -> None:
    if value is None or value is OPT_OUT:
        return
    if not isinstance(value, str) or value.lower() != DEFAULT_VALUE:
        raise XContentTypeOptionsConfigError(
            f"Value can only be nil or 'nosniff', got {value!r}",
            context={"config_key": CONFIG_KEY},
        )


def make_header(value: Any = None) -> tuple[str, str]:
    return HEADER_NAME, value if value is not None else DEFAULT_VALUE

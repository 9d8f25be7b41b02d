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
"""Strict-Transport-Security header.

Accepts either a ready-made header string or a mapping::

    {"max_age": 31536000, "include_subdomains": True, "preload": False}
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from secureheaders.headers.base import OPT_OUT
from secureheaders.kernel.exceptions import StrictTransportSecurityConfigError

CONFIG_KEY = "hsts"
HEADER_NAME = "Strict-Transport-Security"
HSTS_MAX_AGE = "631138519"
DEFAULT_VALUE = f"max-age={HSTS_MAX_AGE}"

VALID_STS_HEADER = re.compile(r"\Amax-age=\d+(; includeSubdomains)?(; preload)?\Z", re.IGNORECASE)


class HstsSettings(BaseModel):
    """Structured form of the header value."""

    model_config = ConfigDict(extra="forbid", strict=True)

    max_age: int = Field(ge=0)
    include_subdomains: bool = False
    preload: bool = False

    def render(self) -> str:
        value = f"max-age={self.max_age}"
        if self.include_subdomains:
            value += "; includeSubdomains"
        if self.preload:
            value += "; preload"
        return value


def validate(value: Any) -> None:
    if value is None or value is OPT_OUT:
        return
    if isinstance(value, Mapping):
        _settings(value)
        return
    if not isinstance(value, str) or not VALID_STS_HEADER.match(value):
        raise StrictTransportSecurityConfigError(
            f"{HEADER_NAME} must be a mapping or match {VALID_STS_HEADER.pattern}, got {value!r}",
            context={"config_key": CONFIG_KEY},
        )


def make_header(value: Any = None) -> tuple[str, str]:
    if value is None:
        value = DEFAULT_VALUE
    if isinstance(value, Mapping):
        value = _settings(value).render()
    return HEADER_NAME, value


def _settings(value: Mapping[str, Any]) -> HstsSettings:
    try:
        return HstsSettings.model_validate(dict(value))
    except ValidationError as exc:
        raise StrictTransportSecurityConfigError(
            f"Invalid {HEADER_NAME} settings:\n{exc}",
            context={"config_key": CONFIG_KEY},
        ) from exc

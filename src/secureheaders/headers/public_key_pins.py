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
"""Public-Key-Pins header.

Opted out unless configured. Pin values are passed through untouched::

    {
        "max_age": 5184000,
        "pins": [{"sha256": "abc..."}, {"sha256": "def..."}],
        "include_subdomains": True,
        "report_uri": "https://report-uri.io/example",
        "report_only": False,
    }
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from secureheaders.headers.base import OPT_OUT
from secureheaders.kernel.exceptions import PublicKeyPinsConfigError

CONFIG_KEY = "hpkp"
HEADER_NAME = "Public-Key-Pins"
REPORT_ONLY_HEADER_NAME = "Public-Key-Pins-Report-Only"
DEFAULT_VALUE = OPT_OUT
HASH_ALGORITHMS = ("sha256",)


class PinSettings(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    max_age: int = Field(ge=0)
    pins: list[dict[str, str]] = Field(min_length=2)
    include_subdomains: bool = False
    report_uri: str | None = None
    report_only: bool = False


def validate(value: Any) -> None:
    if value is None or value is OPT_OUT:
        return
    if not isinstance(value, Mapping):
        raise PublicKeyPinsConfigError(
            f"{HEADER_NAME} settings must be a mapping, got {type(value).__name__}",
            context={"config_key": CONFIG_KEY},
        )
    settings = _settings(value)
    for pin in settings.pins:
        unknown = set(pin) - set(HASH_ALGORITHMS)
        if unknown or not pin:
            raise PublicKeyPinsConfigError(
                f"Pins must use one of {HASH_ALGORITHMS}, got {sorted(pin)}",
                context={"config_key": CONFIG_KEY},
            )


def make_header(value: Any = None) -> tuple[str, str]:
    settings = _settings(value)
    name = REPORT_ONLY_HEADER_NAME if settings.report_only else HEADER_NAME
    parts = [f'pin-{algorithm}="{digest}"' for pin in settings.pins for algorithm, digest in pin.items()]
    parts.append(f"max-age={settings.max_age}")
    if settings.include_subdomains:
        parts.append("includeSubDomains")
    if settings.report_uri:
        parts.append(f'report-uri="{settings.report_uri}"')
    return name, "; ".join(parts)


def _settings(value: Mapping[str, Any]) -> PinSettings:
    try:
        return PinSettings.model_validate(dict(value))
    except ValidationError as exc:
        raise PublicKeyPinsConfigError(
            f"Invalid {HEADER_NAME} settings:\n{exc}",
            context={"config_key": CONFIG_KEY},
        ) from exc

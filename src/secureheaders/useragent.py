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
"""Minimal user-agent classification into CSP support families.

Only the browser family matters for header rendering, so parsing stops at
browser name and major version. Parsing never raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

MODERN = "modern"
FIREFOX = "firefox"
LEGACY = "legacy"

# Ordered; pre-rendering walks the families in this order.
FAMILIES: tuple[str, ...] = (MODERN, FIREFOX, LEGACY)

_REPRESENTATIVES = {
    MODERN: "Chrome",
    FIREFOX: "Firefox",
    LEGACY: "Safari",
}

# First match wins. Edge and Opera embed "Chrome/" so they go first.
_BROWSER_PATTERNS: tuple[tuple[re.Pattern[str], str, str], ...] = (
    (re.compile(r"Edge/(\d+)"), "Edge", LEGACY),
    (re.compile(r"Edg(?:A|iOS)?/(\d+)"), "Edge", MODERN),
    (re.compile(r"(?:OPR|Opera)[/ ](\d+)"), "Opera", MODERN),
    (re.compile(r"(?:Firefox|FxiOS)/(\d+)"), "Firefox", FIREFOX),
    (re.compile(r"(?:Chrome|Chromium|CriOS)/(\d+)"), "Chrome", MODERN),
    (re.compile(r"Version/(\d+).*Safari/"), "Safari", LEGACY),
    (re.compile(r"Safari/(\d+)"), "Safari", LEGACY),
)


@dataclass(frozen=True)
class UserAgent:
    """Parsed user agent: browser name, major version and CSP family."""

    browser: str = "Other"
    version: str | None = None
    family: str = MODERN

    @classmethod
    def for_family(cls, family: str) -> UserAgent:
        """Canonical user agent standing in for a whole family."""
        if family not in _REPRESENTATIVES:
            raise ValueError(f"Unknown user agent family: {family!r}")
        return cls(browser=_REPRESENTATIVES[family], family=family)


def parse(raw: str | UserAgent | None) -> UserAgent:
    """Classify a raw ``User-Agent`` header value.

    Missing or unrecognised input falls back to ``Other`` in the modern
    family.
    """
    if isinstance(raw, UserAgent):
        return raw
    if not raw or not isinstance(raw, str):
        return UserAgent()
    for pattern, browser, family in _BROWSER_PATTERNS:
        match = pattern.search(raw)
        if match:
            return UserAgent(browser=browser, version=match.group(1), family=family)
    return UserAgent()

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
"""Content-Security-Policy model and header builder.

A :class:`Policy` maps snake_case directive names to source lists. Rendering
is per user-agent family because browsers disagree on which directives they
understand; unsupported directives are dropped rather than sent.

Usage::

    policy = Policy.from_value({"default_src": ["'self'"], "report_only": True})
    name, value = make_header(policy, parse(request_user_agent))
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from secureheaders.headers.base import OPT_OUT
from secureheaders.kernel.exceptions import ContentSecurityPolicyConfigError
from secureheaders.useragent import FIREFOX, LEGACY, MODERN, UserAgent, parse

CONFIG_KEY = "csp"
HEADER_NAME = "Content-Security-Policy"
REPORT_ONLY_HEADER_NAME = "Content-Security-Policy-Report-Only"

# Source expression keywords
NONE = "'none'"
SELF = "'self'"
STAR = "*"
UNSAFE_INLINE = "'unsafe-inline'"
UNSAFE_EVAL = "'unsafe-eval'"

# CSP level 1
DEFAULT_SRC = "default_src"
CONNECT_SRC = "connect_src"
FONT_SRC = "font_src"
FRAME_SRC = "frame_src"
IMG_SRC = "img_src"
MEDIA_SRC = "media_src"
OBJECT_SRC = "object_src"
SANDBOX = "sandbox"
SCRIPT_SRC = "script_src"
STYLE_SRC = "style_src"
REPORT_URI = "report_uri"

# CSP level 2
BASE_URI = "base_uri"
CHILD_SRC = "child_src"
FORM_ACTION = "form_action"
FRAME_ANCESTORS = "frame_ancestors"
PLUGIN_TYPES = "plugin_types"

# CSP level 3 drafts
BLOCK_ALL_MIXED_CONTENT = "block_all_mixed_content"
MANIFEST_SRC = "manifest_src"
REFLECTED_XSS = "reflected_xss"
UPGRADE_INSECURE_REQUESTS = "upgrade_insecure_requests"

# Render order: default_src first, report_uri last, the rest alphabetical.
ALL_DIRECTIVES: tuple[str, ...] = (
    DEFAULT_SRC,
    BASE_URI,
    BLOCK_ALL_MIXED_CONTENT,
    CHILD_SRC,
    CONNECT_SRC,
    FONT_SRC,
    FORM_ACTION,
    FRAME_ANCESTORS,
    FRAME_SRC,
    IMG_SRC,
    MANIFEST_SRC,
    MEDIA_SRC,
    OBJECT_SRC,
    PLUGIN_TYPES,
    REFLECTED_XSS,
    SANDBOX,
    SCRIPT_SRC,
    STYLE_SRC,
    UPGRADE_INSECURE_REQUESTS,
    REPORT_URI,
)

DIRECTIVES_1_0 = frozenset(
    {DEFAULT_SRC, CONNECT_SRC, FONT_SRC, FRAME_SRC, IMG_SRC, MEDIA_SRC, OBJECT_SRC, SANDBOX, SCRIPT_SRC, STYLE_SRC, REPORT_URI}
)
DIRECTIVES_2_0 = DIRECTIVES_1_0 | {BASE_URI, CHILD_SRC, FORM_ACTION, FRAME_ANCESTORS, PLUGIN_TYPES}
DIRECTIVES_3_0 = DIRECTIVES_2_0 | {BLOCK_ALL_MIXED_CONTENT, MANIFEST_SRC, REFLECTED_XSS, UPGRADE_INSECURE_REQUESTS}

BOOLEAN_DIRECTIVES = frozenset({BLOCK_ALL_MIXED_CONTENT, UPGRADE_INSECURE_REQUESTS})
NON_SOURCE_DIRECTIVES = frozenset({SANDBOX, PLUGIN_TYPES, REFLECTED_XSS, REPORT_URI})
META_KEYS = frozenset({"report_only", "preserve_schemes"})

FIREFOX_UNSUPPORTED_DIRECTIVES = frozenset({BLOCK_ALL_MIXED_CONTENT, CHILD_SRC, PLUGIN_TYPES})

# Family -> directives the family understands. Ordered like useragent.FAMILIES.
VARIATIONS: dict[str, frozenset[str]] = {
    MODERN: DIRECTIVES_3_0,
    FIREFOX: DIRECTIVES_3_0 - FIREFOX_UNSUPPORTED_DIRECTIVES,
    LEGACY: DIRECTIVES_1_0,
}

# Families that honour nonce- and hash- sources (CSP level 2).
NONCE_AND_HASH_FAMILIES = frozenset({MODERN, FIREFOX})

HTTP_SCHEME_RE = re.compile(r"\Ahttps?://", re.IGNORECASE)
NONCE_OR_HASH_RE = re.compile(r"\A'(nonce|sha256|sha384|sha512)-", re.IGNORECASE)


@dataclass
class Policy:
    """A CSP policy: directive map plus report-only/scheme metadata."""

    directives: dict[str, Any] = field(default_factory=dict)
    report_only: bool = False
    preserve_schemes: bool = False

    @classmethod
    def from_value(cls, value: Policy | Mapping[str, Any]) -> Policy:
        """Coerce a plain mapping (metadata keys included) into a Policy."""
        if isinstance(value, Policy):
            return value.copy()
        if not isinstance(value, Mapping):
            raise ContentSecurityPolicyConfigError(
                f"A policy must be a mapping of directives, got {type(value).__name__}",
                context={"config_key": CONFIG_KEY},
            )
        directives = {str(k): _copy_sources(v) for k, v in value.items() if k not in META_KEYS}
        return cls(
            directives=directives,
            report_only=value.get("report_only", False),
            preserve_schemes=value.get("preserve_schemes", False),
        )

    def copy(self) -> Policy:
        return Policy(
            directives={k: _copy_sources(v) for k, v in self.directives.items()},
            report_only=self.report_only,
            preserve_schemes=self.preserve_schemes,
        )

    def merge(self, directives: Mapping[str, Any]) -> Policy:
        """New policy with the given directives replacing existing ones."""
        merged = self.copy()
        for name, sources in directives.items():
            if name in META_KEYS:
                setattr(merged, name, sources)
            else:
                merged.directives[name] = _copy_sources(sources)
        return merged

    def append(self, directives: Mapping[str, Any]) -> Policy:
        """New policy with the given sources added to existing directives.

        A source-list directive missing from the policy starts from a copy of
        ``default_src`` so appending never loosens the fallback behaviour.
        """
        combined = self.copy()
        for name, sources in directives.items():
            if name in META_KEYS:
                setattr(combined, name, sources)
                continue
            if name in BOOLEAN_DIRECTIVES:
                combined.directives[name] = sources
                continue
            current = combined.directives.get(name)
            if current is None:
                current = [] if name in NON_SOURCE_DIRECTIVES else list(self.directives.get(DEFAULT_SRC, []))
            if not isinstance(sources, (list, tuple)):
                _invalid(f"{name} must be a list of strings, got {sources!r}")
            added = list(sources)
            if added:
                current = [src for src in current if src != NONE]
            combined.directives[name] = _dedup(list(current) + added)
        return combined

    def __deepcopy__(self, memo: dict[int, Any]) -> Policy:
        return self.copy()


DEFAULT_CONFIG = Policy(
    directives={
        DEFAULT_SRC: ["https:"],
        IMG_SRC: ["https:", "data:"],
        OBJECT_SRC: [NONE],
        SCRIPT_SRC: ["https:"],
        STYLE_SRC: [SELF, UNSAFE_INLINE, "https:"],
    }
)
DEFAULT_VALUE = DEFAULT_CONFIG


def default_policy() -> Policy:
    return DEFAULT_CONFIG.copy()


def ua_to_variation(user_agent: UserAgent | str | None) -> str:
    """Family key used to look up a pre-rendered policy."""
    family = parse(user_agent).family
    return family if family in VARIATIONS else MODERN


def validate(value: Any) -> None:
    """Raise ContentSecurityPolicyConfigError if ``value`` cannot be rendered."""
    if value is None or value is OPT_OUT:
        return
    policy = Policy.from_value(value)

    for flag in META_KEYS:
        if not isinstance(getattr(policy, flag), bool):
            _invalid(f"{flag} must be a boolean, got {getattr(policy, flag)!r}")

    if DEFAULT_SRC not in policy.directives:
        _invalid("default_src is required")

    for name, sources in policy.directives.items():
        if name not in ALL_DIRECTIVES:
            _invalid(f"Unknown directive {name!r}")
        if name in BOOLEAN_DIRECTIVES:
            if not isinstance(sources, bool):
                _invalid(f"{name} must be a boolean, got {sources!r}")
        elif not isinstance(sources, list) or not all(isinstance(src, str) for src in sources):
            _invalid(f"{name} must be a list of strings, got {sources!r}")


def make_header(policy: Policy | Mapping[str, Any] | None, user_agent: UserAgent | str | None = None) -> tuple[str, str]:
    """Render ``policy`` for the family ``user_agent`` belongs to."""
    policy = default_policy() if policy is None else Policy.from_value(policy)
    user_agent = parse(user_agent)
    family = user_agent.family if user_agent.family in VARIATIONS else MODERN
    supported = VARIATIONS[family]

    parts: list[str] = []
    for name in ALL_DIRECTIVES:
        if name not in policy.directives or name not in supported:
            continue
        rendered = _render_directive(name, policy.directives[name], policy, family)
        if rendered:
            parts.append(rendered)

    header_name = REPORT_ONLY_HEADER_NAME if policy.report_only else HEADER_NAME
    return header_name, "; ".join(parts)


def _render_directive(name: str, sources: Any, policy: Policy, family: str) -> str | None:
    directive = name.replace("_", "-")
    if name in BOOLEAN_DIRECTIVES:
        return directive if sources else None
    if name in NON_SOURCE_DIRECTIVES:
        return " ".join([directive, *_dedup(sources)]) if sources or name == SANDBOX else None

    values = list(sources)
    if family not in NONCE_AND_HASH_FAMILIES:
        values = [src for src in values if not NONCE_OR_HASH_RE.match(src)]
    if not policy.preserve_schemes:
        values = [HTTP_SCHEME_RE.sub("", src) for src in values]
    values = _dedup(values)
    if len(values) > 1:
        values = [src for src in values if src != NONE]
    if not values:
        values = [NONE]
    return " ".join([directive, *values])


def _dedup(sources: list[str]) -> list[str]:
    return list(dict.fromkeys(sources))


def _copy_sources(sources: Any) -> Any:
    return list(sources) if isinstance(sources, (list, tuple)) else sources


def _invalid(message: str) -> None:
    raise ContentSecurityPolicyConfigError(message, context={"config_key": CONFIG_KEY})

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
"""Application config files: YAML/TOML loading, profiles and env var overrides.

Lookups use dot notation (``secure_headers.default.hsts``). A value is taken
from, highest priority first:

1. the environment, as ``SECURE_HEADERS_DEFAULT_HSTS``;
2. profile overlay files (``secure-headers-<profile>.yaml``);
3. the base file or dict.

String values may reference ``${ENV_VAR}``, ``${other.config.key}`` or
``${key:default}``.
"""

from __future__ import annotations

import os
import re
import tomllib
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

CONFIG_STEM = "secure-headers"
ENV_PREFIX = "SECURE_HEADERS_"
CONFIG_SUFFIXES = (".yaml", ".toml")
MAX_PLACEHOLDER_DEPTH = 10

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")
_MISSING = object()


class Config:
    """Nested configuration data with dot-notation access."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """Files merged into this config, in merge order."""
        return list(self._loaded_sources)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    # -- loading -------------------------------------------------------------

    @classmethod
    def from_sources(cls, base_dir: str | Path, active_profiles: list[str] | None = None) -> Config:
        """Merge ``config/secure-headers.*`` then ``secure-headers.*`` under
        ``base_dir``, then the profile overlays found in either place."""
        search_dirs = (Path(base_dir) / "config", Path(base_dir))
        candidates = [(d / f"{CONFIG_STEM}{suffix}", None) for d in search_dirs for suffix in CONFIG_SUFFIXES]
        for profile in active_profiles or []:
            candidates += [
                (d / f"{CONFIG_STEM}-{profile}{suffix}", profile) for d in search_dirs for suffix in CONFIG_SUFFIXES
            ]
        return cls._merged(candidates)

    @classmethod
    def from_file(cls, path: str | Path, active_profiles: list[str] | None = None) -> Config:
        """Load one file plus its ``<stem>-<profile><suffix>`` siblings.

        A missing base file yields an empty config and its overlays are ignored.
        """
        path = Path(path)
        if not path.is_file():
            return cls()
        candidates: list[tuple[Path, str | None]] = [(path, None)]
        candidates += [
            (path.with_name(f"{path.stem}-{profile}{path.suffix}"), profile) for profile in active_profiles or []
        ]
        return cls._merged(candidates)

    @classmethod
    def _merged(cls, candidates: Iterable[tuple[Path, str | None]]) -> Config:
        data: dict[str, Any] = {}
        sources: list[str] = []
        for candidate, profile in candidates:
            if not candidate.is_file():
                continue
            data = cls._deep_merge(data, cls._load_config_data(candidate))
            sources.append(str(candidate) if profile is None else f"{candidate} (profile: {profile})")
        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @staticmethod
    def _load_config_data(path: Path) -> dict[str, Any]:
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f)
        with open(path) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Return ``base`` updated recursively with ``override``."""
        merged = dict(base)
        for key, value in override.items():
            if isinstance(merged.get(key), dict) and isinstance(value, dict):
                value = Config._deep_merge(merged[key], value)
            merged[key] = value
        return merged

    # -- lookup --------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Value at ``key``, checking the environment first."""
        env_val = os.environ.get(self._env_key(key))
        if env_val is not None:
            return env_val

        value = self._walk(key)
        if value is _MISSING:
            return default
        if isinstance(value, str) and "${" in value:
            return self._resolve_placeholders(value)
        return value

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Mapping stored at ``prefix``, or ``{}``."""
        section = self._walk(prefix)
        return section if isinstance(section, dict) else {}

    @staticmethod
    def _env_key(key: str) -> str:
        # secure_headers.default.hsts -> SECURE_HEADERS_DEFAULT_HSTS
        name = key.removeprefix("secure_headers.")
        return ENV_PREFIX + name.upper().replace(".", "_").replace("-", "_")

    def _walk(self, key: str) -> Any:
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict) or current.get(part) is None:
                return _MISSING
            current = current[part]
        return current

    def _resolve_placeholders(self, value: str, _depth: int = 0) -> str:
        if _depth > MAX_PLACEHOLDER_DEPTH:
            raise ValueError(
                f"Max recursion depth exceeded resolving placeholders in '{value}'. Check for circular references."
            )

        def _replace(match: re.Match[str]) -> str:
            ref_key, sep, default_val = match.group(1).partition(":")

            env_val = os.environ.get(ref_key)
            if env_val is not None:
                return env_val

            referenced = self._walk(ref_key)
            if referenced is not _MISSING:
                resolved = str(referenced)
                return self._resolve_placeholders(resolved, _depth + 1) if "${" in resolved else resolved

            if sep:
                return default_val
            raise ValueError(f"Cannot resolve placeholder '${{{ref_key}}}': not found in environment or config")

        return _PLACEHOLDER_RE.sub(_replace, value)

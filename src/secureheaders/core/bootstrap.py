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
"""Populate a registry from application config files.

Expected layout::

    secure_headers:
      script_hashes_file: config/script_hashes.yml
      logging:
        format: json
        level:
          root: INFO
      default:
        hsts: "max-age=31536000; includeSubdomains"
        x_frame_options: DENY
        csp:
          default_src: ["'self'"]
      overrides:
        api:
          base: default
          csp: opt_out

Overrides are registered in file order, so a base must appear before the
overrides derived from it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog

from secureheaders.configuration import Builder, Configuration
from secureheaders.core.config import Config
from secureheaders.headers import HEADER_KINDS_BY_KEY
from secureheaders.headers.base import OPT_OUT
from secureheaders.kernel.exceptions import ConfigurationError
from secureheaders.logging.structlog_adapter import StructlogAdapter
from secureheaders.registry import DEFAULT_CONFIG, ConfigurationRegistry, get_registry
from secureheaders.script_hashes import SCRIPT_HASH_CONFIG_FILE, load_script_hashes

logger = structlog.get_logger("secureheaders.bootstrap")

OPT_OUT_VALUE = "opt_out"
EXTRA_KEYS = ("dynamic_csp", "secure_cookies")


def configure_from(config: Config, registry: ConfigurationRegistry | None = None) -> ConfigurationRegistry:
    """Register the default configuration and every override found in ``config``."""
    registry = registry if registry is not None else get_registry()

    if config.get_section("secure_headers.logging"):
        StructlogAdapter().configure(config)

    registry.script_hashes = load_script_hashes(
        config.get("secure_headers.script_hashes_file", SCRIPT_HASH_CONFIG_FILE)
    )

    registry.configure(settings_builder(config, "secure_headers.default"))

    for name, section in config.get_section("secure_headers.overrides").items():
        base = section.get("base", DEFAULT_CONFIG) if isinstance(section, dict) else DEFAULT_CONFIG
        registry.override(name, base, settings_builder(config, f"secure_headers.overrides.{name}"))

    logger.info("configurations_loaded", names=registry.names(), sources=config.loaded_sources)
    return registry


def configure_from_file(
    path: str | Path,
    active_profiles: list[str] | None = None,
    registry: ConfigurationRegistry | None = None,
) -> ConfigurationRegistry:
    return configure_from(Config.from_file(path, active_profiles), registry)


def settings_builder(config: Config, prefix: str) -> Builder:
    """Builder applying every header setting found under ``prefix``."""
    keys = [key for key in config.get_section(prefix) if key != "base"]

    def apply(target: Configuration) -> None:
        for key in keys:
            _apply_setting(target, key, config.get(f"{prefix}.{key}"))

    return apply


def _apply_setting(target: Configuration, key: str, value: Any) -> None:
    if key not in HEADER_KINDS_BY_KEY and key not in EXTRA_KEYS:
        raise ConfigurationError(f"Unknown secure headers setting {key!r}", context={"config_key": key})
    if value == OPT_OUT_VALUE:
        if key in HEADER_KINDS_BY_KEY:
            target.opt_out(key)
        else:
            setattr(target, key, OPT_OUT)
        return
    if key == "secure_cookies" and isinstance(value, str):
        value = value.lower() in ("true", "1", "yes")
    setattr(target, key, value)

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
"""Boot-time loading of the script hash list used by ``script_src``."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml  # type: ignore[import-untyped]

from secureheaders.kernel.exceptions import ConfigurationError

logger = structlog.get_logger("secureheaders.script_hashes")

SCRIPT_HASH_CONFIG_FILE = "config/script_hashes.yml"


def load_script_hashes(path: str | Path = SCRIPT_HASH_CONFIG_FILE) -> dict[str, Any]:
    """Read ``{script identifier: hash or [hashes]}`` from a YAML/JSON file.

    A missing file is not an error and yields an empty mapping.
    """
    path = Path(path)
    if not path.is_file():
        logger.debug("script_hashes_absent", path=str(path))
        return {}

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Script hash file {path} must contain a mapping, got {type(data).__name__}",
            context={"path": str(path)},
        )
    logger.info("script_hashes_loaded", path=str(path), count=len(data))
    return data

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
"""Shared Rich console for CLI output."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

SECURE_HEADERS_THEME = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "brand": "bold magenta",
    "dim": "dim",
})

console = Console(theme=SECURE_HEADERS_THEME)


def print_banner() -> None:
    from secureheaders import __version__

    console.print(f"[brand]secureheaders[/brand] [dim](v{__version__})[/dim]")
    console.print("  [dim]Copyright 2026 Firefly Software Solutions Inc. | Apache 2.0 License[/dim]\n")


def print_header_table(title: str, headers: Mapping[str, str]) -> None:
    """Print header name/value pairs, or a note when nothing would be sent."""
    if not headers:
        console.print(f"[warning]{title}: no headers would be sent[/warning]")
        return

    table = Table(title=title, border_style="dim", show_lines=True)
    table.add_column("Header", style="info", no_wrap=True)
    table.add_column("Value", overflow="fold")
    for name, value in headers.items():
        table.add_row(name, value)
    console.print(table)


def print_script_hashes(script_hashes: Mapping[str, Any]) -> None:
    """Print the hash sources available for ``script_src``, per script."""
    table = Table(title="Script hashes", border_style="dim", show_lines=True)
    table.add_column("Script", style="info", no_wrap=True)
    table.add_column("Hashes", overflow="fold")
    for script, hashes in script_hashes.items():
        table.add_row(script, " ".join(map(str, hashes)) if isinstance(hashes, list) else str(hashes))
    console.print(table)

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
"""'secureheaders show' and 'secureheaders variations'."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from secureheaders.cli.console import console, print_header_table, print_script_hashes
from secureheaders.core.bootstrap import configure_from_file
from secureheaders.headers import content_security_policy as csp_header
from secureheaders.kernel.exceptions import SecureHeadersException
from secureheaders.registry import DEFAULT_CONFIG, ConfigurationRegistry
from secureheaders.request import header_hash_for


def _load(config_file: Path, profiles: tuple[str, ...]) -> ConfigurationRegistry:
    try:
        return configure_from_file(config_file, list(profiles), registry=ConfigurationRegistry())
    except SecureHeadersException as exc:
        console.print(f"[error]Invalid configuration:[/error] {exc}")
        raise SystemExit(1) from exc


@click.command()
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--name", default=DEFAULT_CONFIG, show_default=True, help="Configuration name.")
@click.option("--user-agent", default=None, help="User-Agent header to render CSP for.")
@click.option("--profile", "profiles", multiple=True, help="Active profile overlay (repeatable).")
def show_command(config_file: Path, name: str, user_agent: str | None, profiles: tuple[str, ...]) -> None:
    """Print the headers a response would carry."""
    registry = _load(config_file, profiles)
    if name not in registry:
        console.print(f"[error]No configuration named {name!r}[/error] (known: {', '.join(registry.names())})")
        raise SystemExit(1)
    print_header_table(f"{name}", header_hash_for(user_agent, name, registry))
    if registry.script_hashes:
        print_script_hashes(registry.script_hashes)


@click.command()
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--name", default=DEFAULT_CONFIG, show_default=True, help="Configuration name.")
@click.option("--profile", "profiles", multiple=True, help="Active profile overlay (repeatable).")
def variations_command(config_file: Path, name: str, profiles: tuple[str, ...]) -> None:
    """Print the pre-rendered Content-Security-Policy per user agent family."""
    registry = _load(config_file, profiles)
    config = registry.get(name)
    if config is None:
        console.print(f"[error]No configuration named {name!r}[/error] (known: {', '.join(registry.names())})")
        raise SystemExit(1)

    variations = config.cached_headers.get(csp_header.HEADER_NAME)
    if not variations:
        console.print(f"[warning]{name}: Content-Security-Policy is opted out[/warning]")
        return

    table = Table(title=f"{name} CSP variations", border_style="dim", show_lines=True)
    table.add_column("Family", style="info", no_wrap=True)
    table.add_column("Header", no_wrap=True)
    table.add_column("Value", overflow="fold")
    for family, (header, value) in variations.items():
        table.add_row(family, header, value)
    console.print(table)

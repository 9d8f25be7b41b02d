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
"""secureheaders CLI — inspect registered header configurations."""

from __future__ import annotations

import click

from secureheaders.cli.console import print_banner
from secureheaders.core.config import Config
from secureheaders.logging.structlog_adapter import StructlogAdapter


class SecureHeadersCLI(click.Group):
    """Custom Click group that shows the banner on help."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        print_banner()
        super().format_help(ctx, formatter)


@click.group(cls=SecureHeadersCLI)
@click.version_option(package_name="secureheaders")
@click.option("--verbose", "-v", is_flag=True, help="Log registry activity to stderr.")
def cli(verbose: bool) -> None:
    """secureheaders — security response header configurations."""
    level = "DEBUG" if verbose else "WARNING"
    StructlogAdapter().configure(Config({"secure_headers": {"logging": {"level": {"root": level}}}}))


from secureheaders.cli.headers import show_command, variations_command  # noqa: E402

cli.add_command(show_command, name="show")
cli.add_command(variations_command, name="variations")

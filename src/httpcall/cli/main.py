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
"""httpcall CLI: entry point."""

from __future__ import annotations

import click

from httpcall.cli.console import print_header


class HttpCallCLI(click.Group):
    """Custom Click group that shows the httpcall header on help."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        print_header()
        super().format_help(ctx, formatter)


@click.group(cls=HttpCallCLI)
@click.version_option(package_name="httpcall")
def cli() -> None:
    """httpcall: HTTP calls with retries and value extraction."""


from httpcall.cli.call import call_command  # noqa: E402

cli.add_command(call_command, name="call")

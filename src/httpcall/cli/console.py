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

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

HTTPCALL_THEME = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "httpcall": "bold magenta",
    "dim": "dim",
})

console = Console(theme=HTTPCALL_THEME)


def print_header() -> None:
    """Print the httpcall title line."""
    from httpcall import __version__

    console.print(f"[httpcall]httpcall[/httpcall] [dim](v{__version__})[/dim]")
    console.print("  [dim]One HTTP call, retries, and JSONPath/regex extraction into properties.[/dim]\n")


def print_properties(properties: dict[str, str], title: str = "Extracted properties") -> None:
    """Print extracted properties as a two-column table."""
    if not properties:
        console.print("  [dim]No properties extracted.[/dim]")
        return

    table = Table(title=f"[httpcall]{title}[/httpcall]", border_style="dim")
    table.add_column("Property", style="info")
    table.add_column("Value")
    for key in sorted(properties):
        table.add_row(escape(key), escape(properties[key]))
    console.print(table)

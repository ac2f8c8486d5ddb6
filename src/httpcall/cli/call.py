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
"""'httpcall call': Run one configured HTTP call."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import click
from rich.markup import escape

from httpcall.cli.console import console, print_properties
from httpcall.config.properties import HttpCallProperties, LoggingProperties
from httpcall.core.config import Config
from httpcall.core.invocation import HttpCall
from httpcall.kernel.exceptions import ConfigurationException, HttpCallException, PersistenceException
from httpcall.logging.setup import configure_logging
from httpcall.properties.adapters import InMemoryPropertyStore, PropertiesFileStore
from httpcall.properties.ports import PropertyStorePort


def _split_pairs(values: tuple[str, ...], separator: str, option: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for item in values:
        if separator not in item:
            raise click.BadParameter(f"expected NAME{separator}VALUE, got '{item}'", param_hint=option)
        key, value = item.split(separator, 1)
        key = key.strip()
        if not key:
            raise click.BadParameter(f"empty name in '{item}'", param_hint=option)
        pairs[key] = value.strip() if separator == ":" else value
    return pairs


def _overrides(**options: Any) -> dict[str, Any]:
    """Translate CLI options into an ``httpcall`` config section, dropping unset ones."""
    section = {key: value for key, value in options.items() if value not in (None, {}, ())}
    return {"httpcall": section} if section else {}


def _load_config(config_file: Path | None, profiles: tuple[str, ...]) -> Config:
    if config_file is None:
        return Config({})
    return Config.from_file(config_file, active_profiles=list(profiles))


@click.command()
@click.option("--config", "config_file", type=click.Path(path_type=Path, dir_okay=False), default=None,
              help="YAML or TOML file with an 'httpcall' section.")
@click.option("--profile", "profiles", multiple=True, help="Profile overlay(s) merged on top of --config.")
@click.option("--url", default=None, help="Endpoint URL to call.")
@click.option("--method", "-X", default=None, help="HTTP method (default: GET).")
@click.option("--header", "-H", "headers", multiple=True, help="Request header 'Name: value'.")
@click.option("--form", "form_fields", multiple=True, help="Form field 'key=value' (sent URL-encoded).")
@click.option("--body", default=None, help="Raw request body.")
@click.option("--json-path", "json_paths", multiple=True, help="Extraction rule 'property=$.json.path'.")
@click.option("--pattern", "patterns", multiple=True, help="Extraction rule 'property=regex'.")
@click.option("--output-property", default=None, help="Property name for single-rule extraction.")
@click.option("--timeout", type=int, default=None, help="Per-attempt timeout in seconds.")
@click.option("--retry-count", type=int, default=None, help="Retries after the first attempt.")
@click.option("--retry-delay", type=int, default=None, help="Delay between attempts in milliseconds.")
@click.option("--response-file", default=None, help="Save the raw response body to this file.")
@click.option("--fail-on-error/--no-fail-on-error", default=None, help="Exit non-zero on HTTP errors.")
@click.option("--skip-on-failure/--no-skip-on-failure", default=None,
              help="Skip the call when the execution-failed flag is present.")
@click.option("--define", "-D", "defines", multiple=True, help="Seed a property 'key=value' before the call.")
@click.option("--properties-file", type=click.Path(path_type=Path, dir_okay=False), default=None,
              help="Read and write properties from/to this file.")
@click.option("--log-format", type=click.Choice(["console", "json"]), default=None, help="Log output format.")
@click.option("--log-level", default=None, help="Root log level (default: INFO).")
def call_command(
    config_file: Path | None,
    profiles: tuple[str, ...],
    url: str | None,
    method: str | None,
    headers: tuple[str, ...],
    form_fields: tuple[str, ...],
    body: str | None,
    json_paths: tuple[str, ...],
    patterns: tuple[str, ...],
    output_property: str | None,
    timeout: int | None,
    retry_count: int | None,
    retry_delay: int | None,
    response_file: str | None,
    fail_on_error: bool | None,
    skip_on_failure: bool | None,
    defines: tuple[str, ...],
    properties_file: Path | None,
    log_format: str | None,
    log_level: str | None,
) -> None:
    """Make an HTTP call and extract values from the response."""
    try:
        config = _load_config(config_file, profiles)
    except ConfigurationException as exc:
        console.print(f"[error]{escape(str(exc))}[/error]")
        raise SystemExit(2) from None

    logging_overrides: dict[str, Any] = {}
    if log_format:
        logging_overrides["format"] = log_format
    if log_level:
        logging_overrides["level"] = {"root": log_level}
    if logging_overrides:
        config = config.merge({"httpcall": {"logging": logging_overrides}})

    config = config.merge(
        _overrides(
            url=url,
            method=method,
            headers=_split_pairs(headers, ":", "--header"),
            formData=_split_pairs(form_fields, "=", "--form"),
            body=body,
            jsonPaths=_split_pairs(json_paths, "=", "--json-path"),
            extractPatterns=_split_pairs(patterns, "=", "--pattern"),
            outputProperty=output_property,
            timeout=timeout,
            retryCount=retry_count,
            retryDelay=retry_delay,
            responseFile=response_file,
            failOnError=fail_on_error,
            skipOnFailure=skip_on_failure,
        )
    )

    try:
        configure_logging(config.bind(LoggingProperties))
        properties = config.bind(HttpCallProperties)
    except ConfigurationException as exc:
        console.print(f"[error]{escape(str(exc))}[/error]")
        raise SystemExit(2) from None

    store: PropertyStorePort
    store = PropertiesFileStore(properties_file) if properties_file else InMemoryPropertyStore()
    for key, value in _split_pairs(defines, "=", "--define").items():
        store.set(key, value)

    try:
        result = asyncio.run(HttpCall(properties, store).run())
    except HttpCallException as exc:
        console.print(f"[error]✗ {escape(str(exc))}[/error]")
        raise SystemExit(1) from None

    if result.skipped:
        console.print("[warning]Skipped HTTP call due to previous failure[/warning]")
        return
    if result.error:
        console.print(f"[warning]! {escape(result.error)}[/warning]")
    else:
        console.print(f"[success]✓[/success] {properties.method} {escape(properties.url)} -> {result.status_code}")
    print_properties(result.properties)

    if isinstance(store, PropertiesFileStore):
        try:
            path = store.save()
        except PersistenceException as exc:
            console.print(f"[warning]! {escape(str(exc))}[/warning]")
        else:
            console.print(f"  [dim]Properties written to {path}[/dim]")

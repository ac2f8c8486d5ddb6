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
"""Extractor: JSONPath and regex value extraction into a property store."""

from __future__ import annotations

import json
import re
from typing import Any

import structlog
from jsonpath_ng.ext import parse as jsonpath_parse  # type: ignore[import-untyped]

from httpcall.extraction.rules import ExtractionRuleSet, ExtractionStrategy
from httpcall.kernel.exceptions import (
    ExtractionException,
    ExtractionMalformedException,
    ExtractionNotFoundException,
)
from httpcall.properties.ports import PropertyStorePort

logger = structlog.get_logger(__name__)


def to_text(value: Any) -> str:
    """Canonical textual form of a JSON value.

    Strings are kept as-is, booleans become ``true``/``false``, null becomes
    an empty string and objects/arrays are rendered as compact JSON.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def read_json_path(body: str, expression: str) -> str:
    """Return the text of the first value matched by ``expression``.

    Raises:
        ExtractionMalformedException: Body is not JSON or the expression is invalid.
        ExtractionNotFoundException: The expression matched nothing.
    """
    try:
        document = json.loads(body)
    except ValueError as exc:
        raise ExtractionMalformedException(f"Response is not valid JSON: {exc}", context={"path": expression}) from exc

    try:
        matches = jsonpath_parse(expression).find(document)
    except Exception as exc:  # jsonpath_ng raises plain Exception subclasses for lexer/parser errors
        raise ExtractionMalformedException(
            f"Invalid JSONPath '{expression}': {exc}", context={"path": expression}
        ) from exc

    if not matches:
        raise ExtractionNotFoundException(f"JSONPath '{expression}' not found in response", context={"path": expression})
    return to_text(matches[0].value)


def read_pattern(text: str, pattern: str) -> str:
    """Return group 1 of the first match of ``pattern``, or the whole match if it has no groups.

    Raises:
        ExtractionMalformedException: The pattern does not compile.
        ExtractionNotFoundException: The pattern does not match.
    """
    try:
        compiled = re.compile(pattern)
    except re.error as exc:
        raise ExtractionMalformedException(f"Invalid pattern '{pattern}': {exc}", context={"pattern": pattern}) from exc

    match = compiled.search(text)
    if match is None:
        raise ExtractionNotFoundException(f"Pattern '{pattern}' not found in response", context={"pattern": pattern})

    value = match.group(1) if compiled.groups > 0 else match.group(0)
    if value is None:
        raise ExtractionNotFoundException(
            f"Pattern '{pattern}' matched but its first group did not participate", context={"pattern": pattern}
        )
    return value


class Extractor:
    """Applies extraction rules to a response body and publishes the results.

    Every failure is isolated to its rule: not-found conditions are logged
    as warnings, malformed input as errors, and the store is left untouched.
    """

    def __init__(self, store: PropertyStorePort) -> None:
        self._store = store

    def extract_json(self, body: str, expression: str, property_name: str) -> str | None:
        try:
            value = read_json_path(body, expression)
        except ExtractionException as exc:
            self._log_failure(exc, property=property_name, path=expression)
            return None
        return self._publish(property_name, value)

    def extract_regex(self, text: str, pattern: str, property_name: str) -> str | None:
        try:
            value = read_pattern(text, pattern)
        except ExtractionException as exc:
            self._log_failure(exc, property=property_name, pattern=pattern)
            return None
        return self._publish(property_name, value)

    def apply(self, rule_set: ExtractionRuleSet, body: str) -> dict[str, str]:
        """Evaluate every rule of ``rule_set``; return the properties that were set."""
        extract = self.extract_json if rule_set.strategy is ExtractionStrategy.JSONPATH else self.extract_regex
        published: dict[str, str] = {}
        for rule in rule_set.rules:
            value = extract(body, rule.expression, rule.property_name)
            if value is not None:
                published[rule.property_name] = value
        return published

    def _publish(self, property_name: str, value: str) -> str:
        self._store.set(property_name, value)
        logger.info("property_set", property=property_name, value=value)
        return value

    @staticmethod
    def _log_failure(exc: ExtractionException, **context: str) -> None:
        if isinstance(exc, ExtractionNotFoundException):
            logger.warning("extraction_not_found", reason=str(exc), **context)
        else:
            logger.error("extraction_failed", reason=str(exc), **context)

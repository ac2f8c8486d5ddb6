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
"""Extraction rule sets and their selection from configuration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from httpcall.config.properties import HttpCallProperties


class ExtractionStrategy(str, Enum):
    JSONPATH = "jsonpath"
    REGEX = "regex"


@dataclass(frozen=True)
class ExtractionRule:
    """Publish the value selected by ``expression`` as ``property_name``."""

    property_name: str
    expression: str


@dataclass(frozen=True)
class ExtractionRuleSet:
    """Rules of a single strategy, evaluated independently of each other."""

    strategy: ExtractionStrategy
    rules: tuple[ExtractionRule, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    @classmethod
    def jsonpath(cls, paths: Mapping[str, str]) -> ExtractionRuleSet:
        return cls(ExtractionStrategy.JSONPATH, _rules(paths))

    @classmethod
    def regex(cls, patterns: Mapping[str, str]) -> ExtractionRuleSet:
        return cls(ExtractionStrategy.REGEX, _rules(patterns))

    @classmethod
    def empty(cls) -> ExtractionRuleSet:
        return cls(ExtractionStrategy.JSONPATH)

    @classmethod
    def from_properties(cls, properties: HttpCallProperties) -> ExtractionRuleSet:
        """Select the single rule set to evaluate.

        Precedence: ``jsonPaths`` > ``jsonPath`` > ``extractPatterns`` >
        ``extractPattern``. Lower-precedence options are ignored.
        """
        if properties.json_paths:
            return cls.jsonpath(properties.json_paths)
        if properties.json_path is not None:
            return cls.jsonpath({properties.output_property: properties.json_path})
        if properties.extract_patterns:
            return cls.regex(properties.extract_patterns)
        if properties.extract_pattern is not None:
            return cls.regex({properties.output_property: properties.extract_pattern})
        return cls.empty()


def _rules(mapping: Mapping[str, str]) -> tuple[ExtractionRule, ...]:
    return tuple(ExtractionRule(property_name=name, expression=expr) for name, expr in mapping.items())

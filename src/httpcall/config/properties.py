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
"""Configuration properties for a single HTTP call invocation."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from httpcall.core.config import config_properties

DEFAULT_OUTPUT_PROPERTY = "http.response"


@config_properties(prefix="httpcall")
class HttpCallProperties(BaseModel):
    """Configuration for one invocation (httpcall.*).

    Keys are accepted in camelCase (``retryCount``) or snake_case
    (``retry_count``).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    url: str = Field(min_length=1)
    method: str = "GET"
    headers: dict[str, str] = Field(default_factory=dict)
    form_data: dict[str, str] = Field(default_factory=dict)
    body: str | None = None

    extract_pattern: str | None = None
    extract_patterns: dict[str, str] = Field(default_factory=dict)
    json_path: str | None = None
    json_paths: dict[str, str] = Field(default_factory=dict)
    # Recognized for compatibility; never evaluated.
    xpath: str | None = None
    xpaths: dict[str, str] = Field(default_factory=dict)
    output_property: str = DEFAULT_OUTPUT_PROPERTY

    timeout: int = Field(default=30, gt=0, description="Per-attempt timeout (seconds).")
    retry_count: int = Field(default=0, ge=0)
    retry_delay: int = Field(default=1000, ge=0, description="Delay between attempts (milliseconds).")

    skip_on_failure: bool = False
    response_file: str | None = None
    fail_on_error: bool = True

    @field_validator("method", mode="before")
    @classmethod
    def _default_method(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return "GET"
        return value

    @field_validator("headers", "form_data", "extract_patterns", "json_paths", "xpaths", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        return {} if value is None else value

    @property
    def timeout_delta(self) -> timedelta:
        return timedelta(seconds=self.timeout)

    @property
    def retry_delay_delta(self) -> timedelta:
        return timedelta(milliseconds=self.retry_delay)

    @property
    def has_xpath(self) -> bool:
        return bool(self.xpath) or bool(self.xpaths)


@config_properties(prefix="httpcall.logging")
class LoggingProperties(BaseModel):
    """Logging settings (httpcall.logging.*).

    ``level`` maps logger names to level names; ``root`` sets the default.
    A plain string is taken as the root level.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    level: dict[str, str] = Field(default_factory=lambda: {"root": "INFO"})
    format: Literal["console", "json"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _root_shorthand(cls, value: object) -> object:
        if value is None:
            return {"root": "INFO"}
        if isinstance(value, str):
            return {"root": value}
        return value

    @field_validator("level")
    @classmethod
    def _known_levels(cls, value: dict[str, str]) -> dict[str, str]:
        known = logging.getLevelNamesMapping()
        levels = {name: level.upper() for name, level in value.items()}
        for name, level in levels.items():
            if level not in known:
                raise ValueError(f"unknown log level '{level}' for '{name}'")
        return levels

    @field_validator("format", mode="before")
    @classmethod
    def _lower_format(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value

    @property
    def root_level(self) -> str:
        return self.level.get("root", "INFO")

    @property
    def module_levels(self) -> dict[str, str]:
        return {name: level for name, level in self.level.items() if name != "root"}

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
"""Tests for LoggingProperties and configure_logging."""

import logging

import pytest
import structlog

from httpcall.config.properties import LoggingProperties
from httpcall.core.config import Config
from httpcall.kernel.exceptions import ConfigurationException
from httpcall.logging.setup import configure_logging


def _bind(data: dict) -> LoggingProperties:
    return Config({"httpcall": {"logging": data}}).bind(LoggingProperties)


class TestLoggingProperties:
    def test_defaults(self):
        props = Config({}).bind(LoggingProperties)
        assert props.root_level == "INFO"
        assert props.module_levels == {}
        assert props.format == "console"

    def test_levels_are_normalized(self):
        props = _bind({"level": {"root": "debug", "httpcall.client": "warning"}, "format": "JSON"})
        assert props.root_level == "DEBUG"
        assert props.module_levels == {"httpcall.client": "WARNING"}
        assert props.format == "json"

    def test_plain_string_level_is_root(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("HTTPCALL_LOGGING_LEVEL", "error")
        props = Config({}).bind(LoggingProperties)
        assert props.root_level == "ERROR"

    def test_unknown_level_is_rejected(self):
        with pytest.raises(ConfigurationException, match="LoggingProperties"):
            _bind({"level": {"root": "LOUD"}})

    def test_unknown_format_is_rejected(self):
        with pytest.raises(ConfigurationException):
            _bind({"format": "xml"})


class TestConfigureLogging:
    def test_root_and_module_levels_applied(self):
        configure_logging(_bind({"level": {"root": "DEBUG", "httpcall.client": "WARNING"}}))
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpcall.client").level == logging.WARNING

    def test_json_format_uses_json_renderer(self):
        configure_logging(_bind({"format": "json"}))
        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)

    def test_console_format_uses_console_renderer(self):
        configure_logging(_bind({}))
        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)

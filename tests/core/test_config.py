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
"""Tests for configuration loading and property binding."""

from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import BaseModel

from httpcall.config.properties import HttpCallProperties
from httpcall.core.config import Config, config_properties
from httpcall.kernel.exceptions import ConfigurationException


class TestConfig:
    def test_load_from_dict(self):
        config = Config({"httpcall": {"url": "http://localhost", "retryCount": 2}})
        assert config.get("httpcall.url") == "http://localhost"
        assert config.get("httpcall.retryCount") == 2

    def test_get_with_default(self):
        assert Config({}).get("missing.key", "default") == "default"

    def test_load_from_yaml_file(self, tmp_path: Path):
        config_file = tmp_path / "httpcall.yaml"
        config_file.write_text("httpcall:\n  url: http://yaml.local\n  jsonPaths:\n    app.name: $.name\n")
        config = Config.from_file(config_file)
        assert config.get("httpcall.url") == "http://yaml.local"
        assert config.get_section("httpcall")["jsonPaths"] == {"app.name": "$.name"}
        assert config.loaded_sources == [str(config_file)]

    def test_load_from_toml_file(self, tmp_path: Path):
        config_file = tmp_path / "httpcall.toml"
        config_file.write_text('[httpcall]\nurl = "http://toml.local"\nretryCount = 3\n')
        config = Config.from_file(config_file)
        assert config.get("httpcall.retryCount") == 3

    def test_profile_overlay(self, tmp_path: Path):
        base = tmp_path / "httpcall.yaml"
        base.write_text("httpcall:\n  url: http://base.local\n  timeout: 10\n")
        (tmp_path / "httpcall-ci.yaml").write_text("httpcall:\n  url: http://ci.local\n")

        config = Config.from_file(base, active_profiles=["ci"])
        assert config.get("httpcall.url") == "http://ci.local"
        assert config.get("httpcall.timeout") == 10
        assert len(config.loaded_sources) == 2

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(ConfigurationException, match="not found"):
            Config.from_file(tmp_path / "nope.yaml")

    def test_invalid_yaml_raises(self, tmp_path: Path):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("httpcall: [unclosed\n")
        with pytest.raises(ConfigurationException, match="Cannot parse"):
            Config.from_file(config_file)

    def test_merge_overrides_nested(self):
        config = Config({"httpcall": {"url": "http://a", "headers": {"A": "1"}}})
        merged = config.merge({"httpcall": {"headers": {"B": "2"}}})
        assert merged.get_section("httpcall")["headers"] == {"A": "1", "B": "2"}
        assert config.get_section("httpcall")["headers"] == {"A": "1"}

    def test_env_var_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("HTTPCALL_URL", "http://env.local")
        config = Config({"httpcall": {"url": "http://file.local"}})
        assert config.get("httpcall.url") == "http://env.local"

    def test_placeholders_are_not_interpolated(self):
        config = Config({"httpcall": {"url": "http://${HOST}/api"}})
        assert config.get("httpcall.url") == "http://${HOST}/api"


class TestConfigProperties:
    def test_bind_nested_prefix(self):
        @config_properties(prefix="httpcall.proxy")
        class ProxySettings(BaseModel):
            host: str = "localhost"
            port: int = 8080

        config = Config({"httpcall": {"proxy": {"host": "proxy.local", "port": "3128"}}})
        bound = config.bind(ProxySettings)
        assert bound.host == "proxy.local"
        assert bound.port == 3128

    def test_bind_requires_decorator(self):
        class Plain(BaseModel):
            value: int = 0

        with pytest.raises(ConfigurationException, match="not decorated"):
            Config({}).bind(Plain)


class TestHttpCallProperties:
    def test_defaults(self):
        props = Config({"httpcall": {"url": "http://x"}}).bind(HttpCallProperties)
        assert props.method == "GET"
        assert props.headers == {}
        assert props.output_property == "http.response"
        assert props.timeout == 30
        assert props.retry_count == 0
        assert props.retry_delay == 1000
        assert props.skip_on_failure is False
        assert props.fail_on_error is True
        assert props.response_file is None
        assert props.timeout_delta == timedelta(seconds=30)
        assert props.retry_delay_delta == timedelta(seconds=1)

    def test_camel_case_keys(self):
        props = Config(
            {
                "httpcall": {
                    "url": "http://x",
                    "formData": {"a": "b"},
                    "jsonPaths": {"p": "$.p"},
                    "extractPattern": "x(.)",
                    "retryCount": 2,
                    "retryDelay": 10,
                    "failOnError": False,
                    "skipOnFailure": True,
                    "responseFile": "out.txt",
                }
            }
        ).bind(HttpCallProperties)
        assert props.form_data == {"a": "b"}
        assert props.json_paths == {"p": "$.p"}
        assert props.extract_pattern == "x(.)"
        assert props.retry_count == 2
        assert props.retry_delay_delta == timedelta(milliseconds=10)
        assert props.fail_on_error is False
        assert props.skip_on_failure is True
        assert props.response_file == "out.txt"

    def test_snake_case_keys(self):
        props = Config({"httpcall": {"url": "http://x", "retry_count": 4}}).bind(HttpCallProperties)
        assert props.retry_count == 4

    def test_missing_url_is_rejected(self):
        with pytest.raises(ConfigurationException, match="HttpCallProperties"):
            Config({"httpcall": {}}).bind(HttpCallProperties)

    def test_negative_retry_count_is_rejected(self):
        with pytest.raises(ConfigurationException):
            Config({"httpcall": {"url": "http://x", "retryCount": -1}}).bind(HttpCallProperties)

    def test_env_override_by_alias(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("HTTPCALL_RETRYCOUNT", "5")
        props = Config({"httpcall": {"url": "http://x"}}).bind(HttpCallProperties)
        assert props.retry_count == 5

    def test_env_override_beats_file_value(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("HTTPCALL_RETRY_COUNT", "7")
        props = Config({"httpcall": {"url": "http://x", "retryCount": 1}}).bind(HttpCallProperties)
        assert props.retry_count == 7

    def test_null_maps_become_empty(self):
        props = Config({"httpcall": {"url": "http://x", "headers": None}}).bind(HttpCallProperties)
        assert props.headers == {}

    def test_xpath_is_recognized(self):
        props = HttpCallProperties(url="http://x", xpath="//title")
        assert props.has_xpath is True

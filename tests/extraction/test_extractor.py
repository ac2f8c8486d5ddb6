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
"""Tests for Extractor: JSONPath and regex extraction."""

import pytest

from httpcall.extraction.extractor import Extractor, read_json_path, read_pattern, to_text
from httpcall.extraction.rules import ExtractionRuleSet
from httpcall.kernel.exceptions import ExtractionMalformedException, ExtractionNotFoundException
from httpcall.properties.adapters import InMemoryPropertyStore

JSON_BODY = '{"name":"test","version":"1.0","nested":{"value":"nested-data"}}'
HTML_BODY = "<title>Test Page</title><h1>Welcome</h1>"


@pytest.fixture
def store() -> InMemoryPropertyStore:
    return InMemoryPropertyStore()


@pytest.fixture
def extractor(store: InMemoryPropertyStore) -> Extractor:
    return Extractor(store)


class TestToText:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("text", "text"),
            (42, "42"),
            (1.5, "1.5"),
            (True, "true"),
            (False, "false"),
            (None, ""),
            ({"a": 1}, '{"a":1}'),
            (["x", 2], '["x",2]'),
        ],
    )
    def test_canonical_text(self, value, expected):
        assert to_text(value) == expected


class TestJsonPathExtraction:
    def test_multiple_paths(self, extractor, store):
        rules = ExtractionRuleSet.jsonpath(
            {"app.name": "$.name", "app.version": "$.version", "nested.value": "$.nested.value"}
        )
        published = extractor.apply(rules, JSON_BODY)

        assert store.get("app.name") == "test"
        assert store.get("app.version") == "1.0"
        assert store.get("nested.value") == "nested-data"
        assert published == {"app.name": "test", "app.version": "1.0", "nested.value": "nested-data"}

    def test_missing_path_leaves_property_unset_others_still_set(self, extractor, store):
        rules = ExtractionRuleSet.jsonpath({"app.name": "$.name", "app.missing": "$.missing.path"})
        published = extractor.apply(rules, JSON_BODY)

        assert store.get("app.name") == "test"
        assert not store.has("app.missing")
        assert published == {"app.name": "test"}

    def test_non_string_values_converted(self, extractor, store):
        body = '{"count": 3, "ok": true, "ratio": 0.25, "tags": ["a", "b"], "meta": {"k": "v"}, "none": null}'
        rules = ExtractionRuleSet.jsonpath(
            {"c": "$.count", "o": "$.ok", "r": "$.ratio", "t": "$.tags", "m": "$.meta", "n": "$.none"}
        )
        extractor.apply(rules, body)

        assert store.as_dict() == {"c": "3", "o": "true", "r": "0.25", "t": '["a","b"]', "m": '{"k":"v"}', "n": ""}

    def test_array_index(self, extractor, store):
        extractor.extract_json('{"items": [{"id": "first"}, {"id": "second"}]}', "$.items[1].id", "item")
        assert store.get("item") == "second"

    def test_wildcard_takes_first_match(self, extractor, store):
        extractor.extract_json('{"items": [{"id": "first"}, {"id": "second"}]}', "$.items[*].id", "item")
        assert store.get("item") == "first"

    def test_filter_expression(self, extractor, store):
        body = '{"users": [{"name": "alice", "role": "dev"}, {"name": "bob", "role": "admin"}]}'
        extractor.extract_json(body, "$.users[?role == 'admin'].name", "admin")
        assert store.get("admin") == "bob"

    def test_malformed_json_is_recoverable(self, extractor, store):
        assert extractor.extract_json("<html>not json</html>", "$.name", "app.name") is None
        assert len(store) == 0

    def test_invalid_expression_is_recoverable(self, extractor, store):
        rules = ExtractionRuleSet.jsonpath({"bad": "$[[[", "good": "$.name"})
        extractor.apply(rules, JSON_BODY)
        assert not store.has("bad")
        assert store.get("good") == "test"

    def test_overwrites_existing_property(self, extractor, store):
        store.set("app.name", "old")
        extractor.extract_json(JSON_BODY, "$.name", "app.name")
        assert store.get("app.name") == "test"


class TestReadJsonPath:
    def test_not_found_raises(self):
        with pytest.raises(ExtractionNotFoundException, match="not found"):
            read_json_path(JSON_BODY, "$.absent")

    def test_malformed_json_raises(self):
        with pytest.raises(ExtractionMalformedException, match="not valid JSON"):
            read_json_path("{broken", "$.name")


class TestRegexExtraction:
    def test_multiple_patterns(self, extractor, store):
        rules = ExtractionRuleSet.regex(
            {"page.title": "<title>([^<]+)</title>", "page.heading": "<h1>([^<]+)</h1>"}
        )
        published = extractor.apply(rules, HTML_BODY)

        assert store.get("page.title") == "Test Page"
        assert store.get("page.heading") == "Welcome"
        assert published == {"page.title": "Test Page", "page.heading": "Welcome"}

    def test_pattern_without_group_uses_whole_match(self, extractor, store):
        extractor.extract_regex("build 1.2.3 ready", r"\d+\.\d+\.\d+", "version")
        assert store.get("version") == "1.2.3"

    def test_first_group_only(self, extractor, store):
        extractor.extract_regex("key=abc;id=42", r"key=(\w+);id=(\d+)", "key")
        assert store.get("key") == "abc"

    def test_search_is_unanchored(self, extractor, store):
        extractor.extract_regex("prefix token:XYZ suffix", r"token:(\w+)", "token")
        assert store.get("token") == "XYZ"

    def test_first_match_wins(self, extractor, store):
        extractor.extract_regex("<h1>One</h1><h1>Two</h1>", "<h1>([^<]+)</h1>", "heading")
        assert store.get("heading") == "One"

    def test_no_match_leaves_property_unset_others_still_set(self, extractor, store):
        rules = ExtractionRuleSet.regex({"page.title": "<title>([^<]+)</title>", "page.footer": "<footer>(.*)</footer>"})
        extractor.apply(rules, HTML_BODY)
        assert store.get("page.title") == "Test Page"
        assert not store.has("page.footer")

    def test_invalid_pattern_is_recoverable(self, extractor, store):
        rules = ExtractionRuleSet.regex({"bad": "([unclosed", "good": "<h1>([^<]+)</h1>"})
        extractor.apply(rules, HTML_BODY)
        assert not store.has("bad")
        assert store.get("good") == "Welcome"

    def test_optional_group_not_participating_is_not_found(self):
        with pytest.raises(ExtractionNotFoundException, match="did not participate"):
            read_pattern("abc", r"a(x)?bc")

    def test_invalid_pattern_raises_malformed(self):
        with pytest.raises(ExtractionMalformedException):
            read_pattern("abc", "(")

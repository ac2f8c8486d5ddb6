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
"""Request construction from invocation properties."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from types import MappingProxyType
from typing import TYPE_CHECKING
from urllib.parse import quote_plus

if TYPE_CHECKING:
    from httpcall.config.properties import HttpCallProperties


@dataclass(frozen=True)
class RequestSpec:
    """Immutable description of one logical request.

    ``timeout`` applies to each attempt and covers both connecting and the
    request itself.
    """

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str | None = None
    timeout: timedelta = timedelta(seconds=30)


def encode_form(form_data: Mapping[str, str]) -> str:
    """URL-encode form fields as ``key=value`` pairs joined by ``&``."""
    return "&".join(
        f"{quote_plus(str(key), encoding='utf-8')}={quote_plus(str(value), encoding='utf-8')}"
        for key, value in form_data.items()
    )


def resolve_body(properties: HttpCallProperties) -> str | None:
    """Form fields win over a raw body; neither means no body."""
    if properties.form_data:
        return encode_form(properties.form_data)
    return properties.body


def build_request(properties: HttpCallProperties) -> RequestSpec:
    """Build the RequestSpec for an invocation. Never fails."""
    headers: dict[str, str] = {}
    for name, value in properties.headers.items():
        headers[name] = value

    return RequestSpec(
        method=properties.method or "GET",
        url=properties.url,
        headers=MappingProxyType(headers),
        body=resolve_body(properties),
        timeout=properties.timeout_delta,
    )

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
"""Outbound port: property store interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

# Presence of this key means an earlier step of the caller's build has failed.
EXECUTION_FAILED_KEY = "httpcall.execution.failed"


@runtime_checkable
class PropertyStorePort(Protocol):
    """Mutable string-to-string sink receiving extracted values."""

    def has(self, key: str) -> bool: ...

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

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
"""httpcall: one configurable HTTP call with retries and value extraction."""

__version__ = "0.1.0"

from httpcall.config.properties import HttpCallProperties
from httpcall.core.config import Config
from httpcall.core.invocation import HttpCall, InvocationResult
from httpcall.properties.adapters import InMemoryPropertyStore, PropertiesFileStore

__all__ = [
    "Config",
    "HttpCall",
    "HttpCallProperties",
    "InMemoryPropertyStore",
    "InvocationResult",
    "PropertiesFileStore",
    "__version__",
]

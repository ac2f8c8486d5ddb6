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
"""httpcall Client: request building, retrying transport and response processing."""

from httpcall.client.adapters.httpx_adapter import HttpxTransportAdapter
from httpcall.client.ports.outbound import TransportPort
from httpcall.client.request import RequestSpec, build_request, encode_form
from httpcall.client.response import ProcessedResult, ResponseOutcome, ResponseProcessor
from httpcall.client.retry import RetryExecutor, RetryPolicy

__all__ = [
    "HttpxTransportAdapter",
    "ProcessedResult",
    "RequestSpec",
    "ResponseOutcome",
    "ResponseProcessor",
    "RetryExecutor",
    "RetryPolicy",
    "TransportPort",
    "build_request",
    "encode_form",
]

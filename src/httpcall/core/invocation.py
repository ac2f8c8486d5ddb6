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
"""HttpCall: one invocation: build, send with retries, process the response."""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from httpcall.client.adapters.httpx_adapter import HttpxTransportAdapter
from httpcall.client.ports.outbound import TransportPort
from httpcall.client.request import build_request
from httpcall.client.response import ResponseProcessor
from httpcall.client.retry import RetryExecutor, RetryPolicy
from httpcall.config.properties import HttpCallProperties
from httpcall.extraction.extractor import Extractor
from httpcall.extraction.rules import ExtractionRuleSet
from httpcall.kernel.exceptions import RetryExhaustedException
from httpcall.properties.ports import EXECUTION_FAILED_KEY, PropertyStorePort

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class InvocationResult:
    """Outcome of an invocation that did not fail fatally."""

    skipped: bool = False
    status_code: int | None = None
    attempts: int = 0
    properties: dict[str, str] = field(default_factory=dict)
    error: str | None = None


class HttpCall:
    """Runs a single configured HTTP call against a property store.

    Usage::

        store = InMemoryPropertyStore()
        result = await HttpCall(properties, store).run()
        store.get("app.version")

    :meth:`run` raises :class:`~httpcall.kernel.exceptions.HttpStatusException`
    or :class:`~httpcall.kernel.exceptions.RetryExhaustedException` only when
    ``fail_on_error`` is set; every other outcome is returned.
    """

    def __init__(
        self,
        properties: HttpCallProperties,
        store: PropertyStorePort,
        transport: TransportPort | None = None,
    ) -> None:
        self._properties = properties
        self._store = store
        self._transport = transport or HttpxTransportAdapter()
        self._executor = RetryExecutor(RetryPolicy.from_properties(properties))

    @property
    def executor(self) -> RetryExecutor:
        return self._executor

    def should_skip(self) -> bool:
        return self._properties.skip_on_failure and self._store.has(EXECUTION_FAILED_KEY)

    async def run(self) -> InvocationResult:
        props = self._properties
        if self.should_skip():
            logger.info("http_call_skipped", reason="previous failure")
            return InvocationResult(skipped=True)

        if props.has_xpath:
            logger.warning("xpath_not_supported", detail="xpath/xpaths options are ignored")

        spec = build_request(props)
        logger.info("http_call", method=spec.method, url=spec.url)

        try:
            outcome = await self._executor.execute(spec, self._transport)
        except RetryExhaustedException as exc:
            if self._executor.policy.fail_on_error:
                raise
            logger.warning("http_call_failed", error=str(exc), attempts=exc.attempts)
            return InvocationResult(attempts=exc.attempts, error=str(exc))

        processor = ResponseProcessor(
            extractor=Extractor(self._store),
            rule_set=ExtractionRuleSet.from_properties(props),
            fail_on_error=props.fail_on_error,
            response_file=props.response_file,
        )
        processed = processor.process(outcome, url=spec.url)
        return InvocationResult(
            status_code=processed.status_code,
            attempts=self._executor.attempts,
            properties=processed.properties,
        )

"""Retry with a fixed delay for transport-level failures."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

import structlog

from httpcall.kernel.exceptions import (
    RetryExhaustedException,
    TransportException,
    TransportInterruptedException,
)

if TYPE_CHECKING:
    from httpcall.client.ports.outbound import TransportPort
    from httpcall.client.request import RequestSpec
    from httpcall.client.response import ResponseOutcome
    from httpcall.config.properties import HttpCallProperties

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Retry policy with a constant delay between attempts.

    Args:
        max_attempts: Maximum number of attempts (including the first).
        delay: Wait before every attempt except the first.
        fail_on_error: Whether exhausting the attempts stops the caller.
    """

    max_attempts: int = 1
    delay: timedelta = timedelta(seconds=1)
    fail_on_error: bool = True

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.delay < timedelta(0):
            raise ValueError(f"delay must not be negative, got {self.delay}")

    @classmethod
    def from_properties(cls, properties: HttpCallProperties) -> RetryPolicy:
        return cls(
            max_attempts=properties.retry_count + 1,
            delay=properties.retry_delay_delta,
            fail_on_error=properties.fail_on_error,
        )


class RetryExecutor:
    """Drives the transport through a bounded, sequential retry loop.

    Only :class:`TransportException` triggers another attempt. Any received
    response, whatever its status code, ends the loop.
    """

    def __init__(self, policy: RetryPolicy) -> None:
        self._policy = policy
        self._interrupted = asyncio.Event()
        self.attempts = 0

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def interrupt(self) -> None:
        """Wake a pending inter-attempt delay.

        The interrupted attempt is counted as a failed attempt and the
        transport is not called for it.
        """
        self._interrupted.set()

    async def _wait(self) -> None:
        timeout = self._policy.delay.total_seconds()
        try:
            await asyncio.wait_for(self._interrupted.wait(), timeout=timeout)
        except TimeoutError:
            return
        self._interrupted.clear()
        raise TransportInterruptedException("Retry delay interrupted", code="INTERRUPTED")

    async def execute(self, spec: RequestSpec, transport: TransportPort) -> ResponseOutcome:
        """Perform the request, retrying on transport failure.

        Raises:
            RetryExhaustedException: If no attempt received a response.
        """
        max_attempts = self._policy.max_attempts
        last_error: TransportException | None = None
        self.attempts = 0
        self._interrupted.clear()

        for attempt in range(max_attempts):
            try:
                if attempt > 0:
                    logger.info("retry_attempt", attempt=attempt, retries=max_attempts - 1, url=spec.url)
                    await self._wait()

                self.attempts += 1
                return await transport.send(spec.method, spec.url, spec.headers, spec.body, spec.timeout)
            except TransportException as exc:
                last_error = exc
                if attempt < max_attempts - 1:
                    logger.warning("http_call_failed_retrying", attempt=attempt + 1, error=str(exc))

        raise RetryExhaustedException(
            f"HTTP call failed after {max_attempts} attempts: {last_error}",
            attempts=max_attempts,
            last_error=last_error,
        ) from last_error

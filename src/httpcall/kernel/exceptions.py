"""Unified exception hierarchy for httpcall.

All errors raised by the library inherit from HttpCallException, so callers
can catch the base class to handle every failure of an invocation, or catch
specific subclasses for targeted handling.

Categories:
- ConfigurationException: Missing or invalid configuration
- InfrastructureException: Transport, retry and persistence failures
- HttpStatusException: A received response carried a 4xx/5xx status
- ExtractionException: JSONPath/regex extraction failures (always recoverable)
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class HttpCallException(Exception):
    """Base exception for all httpcall errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "TRANSPORT_001").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


class ConfigurationException(HttpCallException):
    """Configuration is missing a required option or holds an invalid value."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(HttpCallException):
    """Infrastructure failures: network transport and local file system."""


class TransportException(InfrastructureException):
    """No HTTP response could be exchanged (refused, DNS, timeout)."""


class TransportInterruptedException(TransportException):
    """A pending retry delay was interrupted before the attempt could run."""


class RetryExhaustedException(InfrastructureException):
    """All retry attempts have been exhausted without receiving a response."""

    def __init__(self, message: str, attempts: int, last_error: Exception | None = None) -> None:
        super().__init__(
            message,
            code="RETRY_EXHAUSTED",
            context={"attempts": attempts, "last_error": str(last_error) if last_error else None},
        )
        self.attempts = attempts
        self.last_error = last_error


class PersistenceException(InfrastructureException):
    """The response body could not be written to the configured file."""


# =============================================================================
# Response Exceptions
# =============================================================================


class HttpStatusException(HttpCallException):
    """A response was received but its status code signals an error (>= 400)."""

    def __init__(self, status_code: int, url: str | None = None) -> None:
        super().__init__(
            f"HTTP request failed with status: {status_code}",
            code="HTTP_STATUS",
            context={"status_code": status_code, "url": url},
        )
        self.status_code = status_code


# =============================================================================
# Extraction Exceptions
# =============================================================================


class ExtractionException(HttpCallException):
    """Base class for value extraction failures."""


class ExtractionNotFoundException(ExtractionException):
    """The JSONPath expression or pattern produced no match."""


class ExtractionMalformedException(ExtractionException):
    """Invalid JSON body, invalid expression or invalid pattern."""

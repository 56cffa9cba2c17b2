"""
Retry-with-exponential-backoff around persistence calls.

Two layers:

- ``with_retry`` runs a zero-argument coroutine function, retrying on any
  exception with delays of ``base_delay_ms * 2**(attempt-1)``. After
  ``max_retries`` failed retries it re-raises the last error.
- ``fetch_with_retry`` accepts a read returning a ``QueryResult`` (the
  ``{data, error}`` convention of the database client), turns an error result
  into ``QueryError``, retries, and on exhaustion logs and returns the caller's
  fallback. It is the only place where a failure becomes a value.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Protocol, TypeVar

from futureagent.core.init_settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY_MS = 500

OnRetry = Callable[[int, BaseException], None]
Sleep = Callable[[float], Awaitable[Any]]


class ErrorLike(Protocol):
    message: str


@dataclass(frozen=True)
class DatabaseError:
    """Error half of a ``QueryResult``."""
    message: str


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """A persistence response: either ``data`` or an ``error`` with a message."""
    data: T | None = None
    error: ErrorLike | None = None

    @classmethod
    def ok(cls, data: T) -> "QueryResult[T]":
        return cls(data=data)

    @classmethod
    def fail(cls, message: str) -> "QueryResult[T]":
        return cls(error=DatabaseError(message))


class QueryError(Exception):
    """Raised when a persistence read or write reports an error."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def backoff_delay_ms(attempt: int, base_delay_ms: int = DEFAULT_BASE_DELAY_MS) -> int:
    """Delay before retrying after failed attempt ``attempt`` (1-based)."""
    return base_delay_ms * 2 ** (attempt - 1)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS,
    on_retry: OnRetry | None = None,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """Run ``operation`` until it succeeds or ``max_retries`` retries have failed.

    Makes at most ``max_retries + 1`` attempts. Never swallows the final error.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return await operation()
        except Exception as exc:
            if attempt > max_retries:
                raise
            if on_retry is not None:
                on_retry(attempt, exc)
            await sleep(backoff_delay_ms(attempt, base_delay_ms) / 1000)


def log_retry(operation: str) -> OnRetry:
    """Build an ``on_retry`` hook that logs each failed attempt."""
    def _log(attempt: int, error: BaseException) -> None:
        logger.warning(
            "%s failed (attempt %d), retrying: %s",
            operation, attempt, error,
            extra={"operation": operation, "attempt": attempt},
        )
    return _log


async def fetch_with_retry(
    query_fn: Callable[[], Awaitable[QueryResult[T]]],
    fallback: T,
    *,
    operation: str = "query",
    max_retries: int | None = None,
    base_delay_ms: int | None = None,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """Run a ``QueryResult`` read with retries, returning ``fallback`` on exhaustion."""
    async def attempt() -> T:
        result = await query_fn()
        if result.error is not None:
            raise QueryError(result.error.message)
        # An empty read keeps the fallback's shape
        return fallback if result.data is None else result.data

    try:
        return await with_retry(
            attempt,
            max_retries=settings.RETRY_MAX_RETRIES if max_retries is None else max_retries,
            base_delay_ms=settings.RETRY_BASE_DELAY_MS if base_delay_ms is None else base_delay_ms,
            on_retry=log_retry(operation),
            sleep=sleep,
        )
    except Exception as exc:
        logger.error(
            "%s failed after retries, using fallback: %s",
            operation, exc,
            exc_info=settings.is_dev,
            extra={"operation": operation, "error": str(exc)},
        )
        return fallback

"""Retry policies for object storage calls.

Deletes are idempotent by external id, so any transient failure is retried.
Uploads are not: a timed-out upload may already exist on the host, and
repeating it leaves an untracked copy. Uploads therefore retry only when the
host refused the request outright with a rate limit.

A host's Retry-After is honored when it fits within max_delay_ms; a longer
wait raises the error instead of holding the request open. With
max_retries=0 (the default) every call runs once.
"""

import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

import structlog

from portfolio_api.providers.errors import (
    StorageError,
    StorageRateLimitError,
    TransientStorageError,
)

if TYPE_CHECKING:
    from portfolio_api.providers.config import StorageConfig

__all__ = ["RetryPolicy"]

logger = structlog.get_logger()

T = TypeVar("T")

# Fraction of the backoff added as random jitter
_JITTER_RATIO = 0.1


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how long to retry one kind of storage call.

    Attributes:
        max_retries: Retries after the first attempt (0 = run once).
        base_delay_ms: First backoff delay; doubles on each retry.
        max_delay_ms: Cap for backoff, and the longest Retry-After honored.
        retry_on: Error types worth another attempt.
    """

    max_retries: int = 0
    base_delay_ms: int = 500
    max_delay_ms: int = 5000
    retry_on: tuple[type[StorageError], ...] = (
        TransientStorageError,
        StorageRateLimitError,
    )

    @classmethod
    def for_uploads(cls, config: "StorageConfig") -> "RetryPolicy":
        """Policy for uploads: rate-limit refusals only."""
        return cls(
            max_retries=max(config.max_retries, 0),
            base_delay_ms=config.retry_base_delay_ms,
            max_delay_ms=config.retry_max_delay_ms,
            retry_on=(StorageRateLimitError,),
        )

    @classmethod
    def for_deletes(cls, config: "StorageConfig") -> "RetryPolicy":
        """Policy for deletes: any transient failure."""
        return cls(
            max_retries=max(config.max_retries, 0),
            base_delay_ms=config.retry_base_delay_ms,
            max_delay_ms=config.retry_max_delay_ms,
        )

    def delay_for(self, attempt: int, error: StorageError) -> float | None:
        """Seconds to wait before retrying after a failed attempt.

        Args:
            attempt: Zero-based index of the attempt that failed.
            error: The error it raised.

        Returns:
            Delay in seconds, or None when the call should not be retried.
        """
        if attempt >= self.max_retries or not isinstance(error, self.retry_on):
            return None

        if isinstance(error, StorageRateLimitError) and error.retry_after_seconds:
            if error.retry_after_seconds * 1000 > self.max_delay_ms:
                return None
            return float(error.retry_after_seconds)

        backoff = self.base_delay_ms * (2**attempt)
        jitter = random.uniform(0, backoff * _JITTER_RATIO)
        return min(backoff + jitter, self.max_delay_ms) / 1000

    async def run(self, operation: Callable[[], Awaitable[T]], *, action: str) -> T:
        """Run an async storage call under this policy.

        Args:
            operation: Zero-argument coroutine function.
            action: Name used in log events ("upload", "delete").

        Returns:
            Result of the first successful attempt.

        Raises:
            StorageError: The last error once no retry applies.
        """
        attempt = 0
        while True:
            try:
                return await operation()
            except StorageError as e:
                delay = self.delay_for(attempt, e)
                if delay is None:
                    raise
                logger.warning(
                    "storage_retry",
                    action=action,
                    attempt=attempt + 1,
                    max_attempts=self.max_retries + 1,
                    delay_seconds=round(delay, 2),
                    error_type=type(e).__name__,
                )
                await asyncio.sleep(delay)
                attempt += 1

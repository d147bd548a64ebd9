"""
Retry Manager for the IndexNow client.

This module provides retry logic with exponential backoff (no jitter) for
transient submission failures. Terminal failures stop immediately.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from .audit_logger import AuditLogger
from .config import RetryConfig
from .exceptions import IndexNowError

T = TypeVar("T")


@dataclass
class RetryResult(Generic[T]):
    """Result of a retry operation."""

    success: bool
    result: Optional[T]
    attempts: int
    last_error: Optional[Exception]

    @property
    def retries(self) -> int:
        """Attempts beyond the first one."""
        return max(0, self.attempts - 1)


class RetryManager:
    """
    Manages retry logic with exponential backoff.

    delay(n) = initial_delay * backoff_factor ** n, capped at max_delay,
    where n is the 0-indexed attempt that just failed.
    """

    def __init__(
        self,
        config: RetryConfig,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the retry manager.

        Args:
            config: Retry configuration with max_retries and delays
            sleep: Async sleep used between attempts; injectable for tests
            logger: Optional logger for per-attempt warnings
        """
        self._config = config
        self._sleep = sleep
        self._logger = logger

    def calculate_delay(self, attempt: int) -> float:
        delay = self._config.initial_delay_seconds * (self._config.backoff_factor ** attempt)
        return min(delay, self._config.max_delay_seconds)

    @staticmethod
    def is_retryable_error(error: Exception) -> bool:
        """
        Check if an error is transient and worth retrying.

        Only package errors carry a retry classification; anything else
        is treated as terminal.
        """
        if isinstance(error, IndexNowError):
            return error.retryable
        return False

    async def execute_with_retry(
        self,
        operation: Callable[[], Awaitable[T]],
        is_retryable: Optional[Callable[[Exception], bool]] = None,
        label: str = "operation",
    ) -> RetryResult[T]:
        """
        Execute an operation with retry logic and exponential backoff.

        Args:
            operation: The async operation to execute
            is_retryable: Classifier for failures (defaults to is_retryable_error)
            label: Name used in log entries (e.g. the endpoint URL)

        Returns:
            RetryResult containing success status, result, attempts, and last error
        """
        classify = is_retryable or self.is_retryable_error
        last_error: Optional[Exception] = None
        attempts = 0

        # Total attempts = 1 initial + max_retries
        max_attempts = self._config.max_retries + 1

        while attempts < max_attempts:
            try:
                result = await operation()
                return RetryResult(
                    success=True,
                    result=result,
                    attempts=attempts + 1,
                    last_error=None,
                )
            except Exception as e:
                last_error = e
                attempts += 1

                if not classify(e) or attempts >= max_attempts:
                    break

                if self._logger:
                    self._logger.warn(
                        "retry_manager",
                        f"{label} failed (attempt {attempts}/{max_attempts}): {e}",
                    )

                await self._sleep(self.calculate_delay(attempts - 1))

        if self._logger:
            self._logger.log_error(
                "retry_manager",
                f"{label} failed after {attempts} attempt(s)",
                error=last_error,
            )

        return RetryResult(
            success=False,
            result=None,
            attempts=attempts,
            last_error=last_error,
        )

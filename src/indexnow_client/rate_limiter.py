"""
Rate Limiter module for the IndexNow client.

A sliding-window limiter: bursts up to the per-minute cap are let through
back-to-back, after which each caller is suspended until the oldest
operation in the window falls out of it.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from .audit_logger import AuditLogger
from .config import RateLimitConfig


@dataclass
class RateLimitStatus:
    """Result of a rate limit check."""

    allowed: bool
    wait_seconds: float
    reason: Optional[str] = None


class RateLimiter:
    """
    Sliding-window limiter for outbound submission operations.

    The limiter is not a semaphore: two coroutines that check before
    either records can both pass. Callers on one event loop run it
    sequentially, which is all the client needs.
    """

    def __init__(
        self,
        config: RateLimitConfig,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the rate limiter.

        Args:
            config: Rate limit configuration (cap and window length)
            clock: Time source in seconds; injectable for tests
            sleep: Async sleep used for suspensions; injectable for tests
            logger: Optional logger for wait notices
        """
        self._config = config
        self._clock = clock
        self._sleep = sleep
        self._logger = logger
        self._request_times: list[float] = []

    @property
    def request_times(self) -> list[float]:
        """Recorded operation timestamps (for testing)."""
        return self._request_times.copy()

    def _prune(self, current_time: float) -> None:
        window_start = current_time - self._config.window_seconds
        self._request_times = [t for t in self._request_times if t > window_start]

    def status(self) -> RateLimitStatus:
        """
        Compute whether an operation may start now, without recording it.

        Returns:
            RateLimitStatus with the required wait in seconds
        """
        current_time = self._clock()
        self._prune(current_time)

        cap = self._config.max_requests_per_minute
        if len(self._request_times) >= cap:
            oldest_request = min(self._request_times)
            wait_seconds = self._config.window_seconds - (current_time - oldest_request)
            wait_seconds = max(0.0, wait_seconds)
            return RateLimitStatus(
                allowed=wait_seconds == 0.0,
                wait_seconds=wait_seconds,
                reason=f"Rate limit reached: {len(self._request_times)}/{cap}",
            )

        return RateLimitStatus(allowed=True, wait_seconds=0.0)

    async def check_limit(self) -> float:
        """
        Wait until an operation is allowed, then record it.

        The window is re-checked after every suspension, so coroutines
        sharing one limiter each wait for a free slot of their own.

        Returns:
            Seconds spent suspended
        """
        waited = 0.0
        status = self.status()

        while len(self._request_times) >= self._config.max_requests_per_minute:
            oldest_request = min(self._request_times)

            if status.wait_seconds > 0:
                if self._logger:
                    self._logger.info(
                        "rate_limiter",
                        f"Rate limit reached, waiting {status.wait_seconds:.1f}s",
                        {"reason": status.reason},
                    )
                await self._sleep(status.wait_seconds)
                waited += status.wait_seconds

            # Everything up to the oldest entry seen before the wait has left the window
            self._request_times = [t for t in self._request_times if t > oldest_request]
            status = self.status()

        self._request_times.append(self._clock())
        return waited

    def reset(self) -> None:
        self._request_times.clear()

"""
Property-based tests for the sliding-window rate limiter.

The clock and sleep are faked, so suspensions are measured exactly.
"""

import asyncio

from hypothesis import given, settings
from hypothesis import strategies as st

from indexnow_client.config import RateLimitConfig
from indexnow_client.rate_limiter import RateLimiter

from fakes import FakeClock


def make_limiter(cap: int, clock: FakeClock) -> RateLimiter:
    return RateLimiter(
        RateLimitConfig(max_requests_per_minute=cap),
        clock=clock,
        sleep=clock.sleep,
    )


class TestSlidingWindow:

    @given(cap=st.integers(min_value=1, max_value=30))
    @settings(max_examples=50)
    def test_burst_up_to_cap_is_not_throttled(self, cap: int) -> None:
        clock = FakeClock()
        limiter = make_limiter(cap, clock)

        async def run() -> None:
            for _ in range(cap):
                await limiter.check_limit()

        asyncio.run(run())

        assert clock.sleeps == []
        assert len(limiter.request_times) == cap

    @given(
        cap=st.integers(min_value=1, max_value=20),
        spacing=st.floats(min_value=0.0, max_value=0.05),
    )
    @settings(max_examples=100)
    def test_call_over_cap_waits_for_oldest_to_leave_window(self, cap: int, spacing: float) -> None:
        """
        The (cap+1)-th call within one second waits
        60 - (now - oldest) seconds.
        """
        clock = FakeClock()
        limiter = make_limiter(cap, clock)
        first = clock.now

        async def run() -> float:
            for _ in range(cap):
                await limiter.check_limit()
                clock.advance(spacing)
            return await limiter.check_limit()

        waited = asyncio.run(run())

        expected = 60.0 - (first + cap * spacing - first)
        assert abs(waited - expected) < 1e-6
        assert clock.sleeps == [waited]

    @given(cap=st.integers(min_value=1, max_value=20))
    @settings(max_examples=50)
    def test_window_never_exceeds_cap(self, cap: int) -> None:
        clock = FakeClock()
        limiter = make_limiter(cap, clock)

        async def run() -> None:
            for _ in range(cap * 3):
                await limiter.check_limit()
                assert len(limiter.request_times) <= cap

        asyncio.run(run())

    def test_old_operations_are_pruned(self) -> None:
        clock = FakeClock()
        limiter = make_limiter(2, clock)

        async def run() -> float:
            await limiter.check_limit()
            await limiter.check_limit()
            clock.advance(61.0)
            return await limiter.check_limit()

        assert asyncio.run(run()) == 0.0
        assert len(limiter.request_times) == 1

    def test_status_does_not_record(self) -> None:
        clock = FakeClock()
        limiter = make_limiter(1, clock)

        assert limiter.status().allowed
        assert limiter.request_times == []


class TestSharedLimiter:
    """Several coroutines checking one limiter on the same event loop."""

    def test_concurrent_waiters_each_get_their_own_slot(self) -> None:
        clock = FakeClock()
        limiter = make_limiter(1, clock)
        start = clock.now

        async def run() -> list[float]:
            await limiter.check_limit()
            return await asyncio.gather(limiter.check_limit(), limiter.check_limit())

        waits = asyncio.run(run())

        assert len(waits) == 2
        assert len(limiter.request_times) == 1
        # Three operations under a cap of one need two full windows
        assert clock.now - start >= 120.0

    @given(
        cap=st.integers(min_value=1, max_value=5),
        callers=st.integers(min_value=2, max_value=8),
    )
    @settings(max_examples=50)
    def test_window_holds_at_most_cap_under_interleaving(self, cap: int, callers: int) -> None:
        clock = FakeClock()
        limiter = make_limiter(cap, clock)
        recorded: list[float] = []

        async def caller() -> None:
            await limiter.check_limit()
            recorded.append(clock.now)
            assert len(limiter.request_times) <= cap

        async def run() -> None:
            for _ in range(cap):
                await limiter.check_limit()
            await asyncio.gather(*(caller() for _ in range(callers)))

        asyncio.run(run())

        assert len(recorded) == callers
        for t in recorded:
            in_window = [r for r in recorded if t - 60.0 < r <= t]
            assert len(in_window) <= cap

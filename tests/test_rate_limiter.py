# tests/test_rate_limiter.py
import asyncio
import time

import pytest

from app.llm.rate_limiter import RateLimiter


class TestRateLimiter:
    """Minimum spacing between dispatches."""

    @pytest.mark.asyncio
    async def test_first_request_not_delayed(self, fake_clock):
        limiter = RateLimiter(2.0, clock=fake_clock, sleep=fake_clock.sleep)

        assert await limiter.wait_if_needed() == 0
        assert fake_clock.sleeps == []

    @pytest.mark.asyncio
    async def test_second_request_waits_remaining_interval(self, fake_clock):
        limiter = RateLimiter(2.0, clock=fake_clock, sleep=fake_clock.sleep)

        await limiter.wait_if_needed()
        fake_clock.advance(0.5)
        delay = await limiter.wait_if_needed()

        assert delay == pytest.approx(1.5)
        assert fake_clock.sleeps == [pytest.approx(1.5)]

    @pytest.mark.asyncio
    async def test_no_wait_after_interval_elapsed(self, fake_clock):
        limiter = RateLimiter(2.0, clock=fake_clock, sleep=fake_clock.sleep)

        await limiter.wait_if_needed()
        fake_clock.advance(5)

        assert await limiter.wait_if_needed() == 0

    @pytest.mark.asyncio
    async def test_timestamp_recorded_at_send_slot(self, fake_clock):
        limiter = RateLimiter(2.0, clock=fake_clock, sleep=fake_clock.sleep)

        await limiter.wait_if_needed()
        first = limiter.last_request_time
        await limiter.wait_if_needed()

        assert limiter.last_request_time == pytest.approx(first + 2.0)
        assert fake_clock() == pytest.approx(first + 2.0)

    def test_concurrent_callers_queue_behind_each_other(self, fake_clock):
        """Callers arriving together get slots 0, 2, 4 seconds apart."""
        limiter = RateLimiter(2.0, clock=fake_clock, sleep=fake_clock.sleep)

        delays = [limiter.reserve() for _ in range(3)]

        assert delays == [0, pytest.approx(2.0), pytest.approx(4.0)]

    @pytest.mark.asyncio
    async def test_real_clock_spacing(self):
        """Back-to-back calls on the real event loop are spaced."""
        limiter = RateLimiter(0.1)
        send_times = []

        async def send():
            await limiter.wait_if_needed()
            send_times.append(time.monotonic())

        await asyncio.gather(send(), send(), send())

        send_times.sort()
        gaps = [b - a for a, b in zip(send_times, send_times[1:])]

        assert all(gap >= 0.09 for gap in gaps)

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            RateLimiter(-1)

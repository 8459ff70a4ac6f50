# app/llm/rate_limiter.py

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from app.config import MIN_REQUEST_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Minimum wall-clock spacing between dispatches.

    The slot for the next send is reserved before the caller suspends,
    so a call that arrives while an earlier one is still waiting (or in
    flight) queues behind it instead of reading a stale timestamp.

    Clock and sleep are injectable for tests.
    """

    def __init__(
        self,
        min_interval: float = MIN_REQUEST_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if min_interval < 0:
            raise ValueError(f"Invalid minimum interval: {min_interval}")

        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self.last_request_time: Optional[float] = None

    def reserve(self) -> float:
        """Claim the next send slot and return how long to wait for it."""

        now = self._clock()

        if self.last_request_time is None:
            slot = now
        else:
            slot = max(now, self.last_request_time + self.min_interval)

        self.last_request_time = slot

        return slot - now

    async def wait_if_needed(self) -> float:

        delay = self.reserve()

        if delay > 0:

            logger.info(
                "Rate limiter delaying request",
                extra={"delay_seconds": round(delay, 3)},
            )

            await self._sleep(delay)

        return delay

"""Token-bucket rate limiter shared by every outbound upstream request.

The limiter owns its mutable state (available permits, last refill time) and
serializes acquisition through an ``asyncio.Lock``. Waiters are woken in the
order they arrived, so permits are granted first-come-first-served.
"""
from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Awaitable, Callable

from loguru import logger

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RateBudget:
    """One permit every ``refill_interval_seconds``, at most ``burst`` banked."""

    refill_interval_seconds: float = 2.0
    burst: int = 5

    def __post_init__(self) -> None:
        if self.refill_interval_seconds <= 0:
            raise ValueError("refill_interval_seconds must be positive")
        if self.burst < 1:
            raise ValueError("burst must be at least 1")


class TokenBucketLimiter:
    """Async token bucket. Starts full; ``acquire`` blocks until a permit is free.

    ``clock`` and ``sleep`` are injectable so tests can drive time by hand.
    """

    def __init__(
        self,
        budget: RateBudget,
        *,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._budget = budget
        self._clock = clock
        self._sleep = sleep
        self._tokens = float(budget.burst)
        self._last_refill = clock()
        self._lock = asyncio.Lock()

    @property
    def budget(self) -> RateBudget:
        return self._budget

    @property
    def available(self) -> float:
        """Permits currently banked (refilled up to now)."""
        self._refill()
        return self._tokens

    def _refill(self) -> None:
        now = self._clock()
        elapsed = max(0.0, now - self._last_refill)
        self._tokens = min(
            float(self._budget.burst),
            self._tokens + elapsed / self._budget.refill_interval_seconds,
        )
        self._last_refill = now

    async def acquire(self) -> float:
        """Take one permit, sleeping while the bucket is empty. Returns seconds waited."""
        async with self._lock:
            self._refill()
            waited = 0.0
            if self._tokens < 1.0:
                waited = (1.0 - self._tokens) * self._budget.refill_interval_seconds
                logger.debug("rate limit reached, waiting {:.3f}s for next permit", waited)
                await self._sleep(waited)
                self._refill()
                self._tokens = max(self._tokens, 1.0)
            self._tokens -= 1.0
            return waited

"""Rate limiting for outbound API calls."""

import asyncio
import time
from collections import deque
from typing import Deque


class RateLimiter:
    """Rolling window rate limiter.

    At most ``max_requests`` acquisitions are granted within any interval of
    ``period`` seconds. Callers over the limit are suspended until the oldest
    acquisition leaves the window.
    """

    def __init__(self, max_requests: int, period: float):
        """Initialize rate limiter.

        Args:
            max_requests: Maximum requests allowed per window
            period: Window length in seconds
        """
        if max_requests <= 0:
            raise ValueError('max_requests must be positive')
        if period <= 0:
            raise ValueError('period must be positive')

        self.max_requests = max_requests
        self.period = period
        self._timestamps: Deque[float] = deque()
        self._lock = asyncio.Lock()

    def _prune(self, now: float) -> None:
        while self._timestamps and now - self._timestamps[0] >= self.period:
            self._timestamps.popleft()

    async def acquire(self) -> None:
        """Acquire a slot for making a request.

        Blocks until a slot is available.
        """
        async with self._lock:
            while True:
                now = time.monotonic()
                self._prune(now)

                if len(self._timestamps) < self.max_requests:
                    self._timestamps.append(now)
                    return

                await asyncio.sleep(self._timestamps[0] + self.period - now)

    def can_proceed(self) -> bool:
        """Check if a request can proceed without blocking.

        Returns:
            True if a slot is free, False otherwise
        """
        self._prune(time.monotonic())
        return len(self._timestamps) < self.max_requests

    def time_until_next_request(self) -> float:
        """Get time until next request can be made.

        Returns:
            Seconds until next request is allowed
        """
        now = time.monotonic()
        self._prune(now)

        if len(self._timestamps) < self.max_requests:
            return 0.0

        return max(0.0, self._timestamps[0] + self.period - now)

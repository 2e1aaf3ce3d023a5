"""Tests for the rolling window rate limiter."""

import time

import pytest

from forgejo_import.api.rate_limiter import RateLimiter


class TestRateLimiter:
    """Test rate limiter."""

    def test_rejects_non_positive_limits(self):
        """Zero or negative limits are configuration errors."""
        with pytest.raises(ValueError):
            RateLimiter(0, 1.0)
        with pytest.raises(ValueError):
            RateLimiter(1, 0)

    @pytest.mark.asyncio
    async def test_acquire_within_limit_does_not_block(self):
        """Requests up to the limit are granted immediately."""
        limiter = RateLimiter(3, 10.0)

        start = time.monotonic()
        for _ in range(3):
            await limiter.acquire()

        assert time.monotonic() - start < 0.5
        assert limiter.can_proceed() is False

    @pytest.mark.asyncio
    async def test_acquire_over_limit_waits_for_window(self):
        """The request over the limit is suspended until the window rolls."""
        limiter = RateLimiter(2, 0.2)

        start = time.monotonic()
        for _ in range(3):
            await limiter.acquire()
        elapsed = time.monotonic() - start

        assert elapsed >= 0.19

    @pytest.mark.asyncio
    async def test_time_until_next_request(self):
        """A full window reports the time until its oldest slot frees up."""
        limiter = RateLimiter(1, 5.0)

        assert limiter.time_until_next_request() == 0.0

        await limiter.acquire()

        remaining = limiter.time_until_next_request()
        assert 0.0 < remaining <= 5.0

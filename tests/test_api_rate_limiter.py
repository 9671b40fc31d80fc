"""Tests for the API rate limiter."""

import time

import pytest

from sbb_departures.adapters.api_rate_limiter import ApiRateLimiter


class TestApiRateLimiter:
    """Tests for ApiRateLimiter class."""

    @pytest.mark.asyncio
    async def test_first_request_is_immediate(self) -> None:
        """Given a fresh limiter, when acquiring, then no wait happens."""
        limiter = ApiRateLimiter("test_api", min_delay_seconds=1.0)

        start = time.monotonic()
        await limiter.acquire()

        assert time.monotonic() - start < 0.05

    @pytest.mark.asyncio
    async def test_second_request_waits_for_delay(self) -> None:
        """Given a recent request, when acquiring again, then the minimum spacing is kept."""
        delay = 0.2
        limiter = ApiRateLimiter("test_api", min_delay_seconds=delay)
        await limiter.acquire()

        start = time.monotonic()
        await limiter.acquire()

        assert time.monotonic() - start >= delay * 0.9

    def test_for_api_shares_one_instance_per_name(self) -> None:
        """Given two lookups of one API, when resolving, then the same limiter is returned."""
        first = ApiRateLimiter.for_api("ojp_api", 0.5)
        second = ApiRateLimiter.for_api("ojp_api", 2.0)
        other = ApiRateLimiter.for_api("transport_api", 0.2)

        assert first is second
        assert first.min_delay_seconds == 0.5
        assert other is not first

    def test_reset_forgets_instances(self) -> None:
        """Given a shared limiter, when resetting, then a new one is created next time."""
        first = ApiRateLimiter.for_api("ojp_api")

        ApiRateLimiter.reset()

        assert ApiRateLimiter.for_api("ojp_api") is not first

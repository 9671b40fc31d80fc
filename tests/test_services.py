"""Tests for the small application services: error classification, caching and retries."""

import aiohttp
import pytest

from sbb_departures.application.services import BoundedBoardCache, RetryPolicy
from sbb_departures.application.services.error_classifier import extract_error_details
from sbb_departures.domain.errors import (
    ConfigurationError,
    UpstreamProtocolError,
    UpstreamTransportError,
)


class TestExtractErrorDetails:
    """Tests for extract_error_details."""

    @pytest.mark.parametrize(
        ("status", "reason"),
        [
            (429, "Rate limit exceeded"),
            (502, "Bad gateway (server error)"),
            (503, "Service unavailable"),
            (504, "Gateway timeout"),
            (401, "HTTP 401"),
        ],
    )
    def test_transport_error_with_status(self, status: int, reason: str) -> None:
        """Given a status code, when classifying, then the matching reason is returned."""
        details = extract_error_details(UpstreamTransportError("failed", status_code=status))

        assert details.status_code == status
        assert details.reason == reason
        assert details.retryable is True

    def test_transport_error_without_status(self) -> None:
        """Given an unreachable upstream, when classifying, then no status is reported."""
        details = extract_error_details(UpstreamTransportError("connection refused"))

        assert details.status_code is None
        assert details.reason == "Upstream unreachable"

    def test_protocol_error(self) -> None:
        """Given a malformed payload, when classifying, then it is an invalid response."""
        details = extract_error_details(UpstreamProtocolError("missing stationboard"))

        assert details.reason == "Invalid upstream response"
        assert details.retryable is True

    def test_configuration_error_is_not_retryable(self) -> None:
        """Given a configuration error, when classifying, then it is not retryable."""
        details = extract_error_details(ConfigurationError("OJP_API_KEY is not configured"))

        assert details.retryable is False

    def test_status_code_parsed_from_message(self) -> None:
        """Given a foreign error mentioning a status, when classifying, then it is extracted."""
        details = extract_error_details(aiohttp.ClientError("API returned status (503)"))

        assert details.status_code == 503
        assert details.reason == "Service unavailable"

    def test_unknown_error(self) -> None:
        """Given an unrelated error, when classifying, then the reason is unknown."""
        details = extract_error_details(RuntimeError("boom"))

        assert details.status_code is None
        assert details.reason == "Unknown error"


class TestBoundedBoardCache:
    """Tests for BoundedBoardCache."""

    def test_empty_cache_misses(self) -> None:
        """Given an empty cache, when reading, then None is returned."""
        cache: BoundedBoardCache[list[str]] = BoundedBoardCache("aarau", max_uses=2)

        assert cache.get() is None

    def test_value_served_up_to_bound(self) -> None:
        """Given a bound of two, when reading three times, then the third read misses."""
        cache: BoundedBoardCache[list[str]] = BoundedBoardCache("aarau", max_uses=2)
        cache.set(["IR36"])

        assert cache.get() == ["IR36"]
        assert cache.get() == ["IR36"]
        assert cache.exhausted is True
        assert cache.get() is None

    def test_set_resets_uses(self) -> None:
        """Given an exhausted cache, when storing a new value, then it is served again."""
        cache: BoundedBoardCache[list[str]] = BoundedBoardCache("aarau", max_uses=1)
        cache.set(["IR36"])
        cache.get()

        cache.set(["IC5"])

        assert cache.get() == ["IC5"]

    def test_unbounded_cache(self) -> None:
        """Given no bound, when reading many times, then the value keeps being served."""
        cache: BoundedBoardCache[str] = BoundedBoardCache("route")
        cache.set("value")

        assert [cache.get() for _ in range(10)] == ["value"] * 10

    def test_clear(self) -> None:
        """Given a stored value, when clearing, then reads miss."""
        cache: BoundedBoardCache[str] = BoundedBoardCache("route")
        cache.set("value")

        cache.clear()

        assert cache.get() is None


class TestRetryPolicy:
    """Tests for RetryPolicy."""

    def test_default_delays(self) -> None:
        """Given the default policy, when computing delays, then they grow by five seconds."""
        policy = RetryPolicy()

        assert [policy.delay_for(attempt) for attempt in (1, 2, 3, 4)] == [5, 10, 15, 15]

    def test_can_retry_until_max_attempts(self) -> None:
        """Given three allowed attempts, when checking, then the fourth failure stops retries."""
        policy = RetryPolicy(max_attempts=3)

        assert policy.can_retry(0) is True
        assert policy.can_retry(2) is True
        assert policy.can_retry(3) is False

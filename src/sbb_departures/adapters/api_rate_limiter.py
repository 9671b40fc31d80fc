"""Rate limiter for outgoing upstream requests.

Each upstream API gets one shared limiter that enforces a minimum spacing
between requests, so bursts from retries and parallel fetches stay polite.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import ClassVar

logger = logging.getLogger(__name__)


class ApiRateLimiter:
    """Enforces a minimum delay between requests to one upstream API."""

    _instances: ClassVar[dict[str, ApiRateLimiter]] = {}

    def __init__(self, api_name: str, min_delay_seconds: float = 0.5) -> None:
        """Initialize the rate limiter.

        Args:
            api_name: Name of the API (for logging).
            min_delay_seconds: Minimum spacing between request starts in seconds.
        """
        self.api_name = api_name
        self.min_delay_seconds = min_delay_seconds
        self._next_slot: float = 0.0
        self._lock = asyncio.Lock()

    @classmethod
    def for_api(cls, api_name: str, min_delay_seconds: float = 0.5) -> ApiRateLimiter:
        """Get the shared limiter for an API, creating it on first use."""
        limiter = cls._instances.get(api_name)
        if limiter is None:
            limiter = cls(api_name, min_delay_seconds)
            cls._instances[api_name] = limiter
            logger.info(f"Created rate limiter for {api_name} ({min_delay_seconds}s spacing)")
        return limiter

    @classmethod
    def reset(cls) -> None:
        """Forget all shared limiters."""
        cls._instances.clear()

    async def acquire(self) -> None:
        """Wait until the next request slot is free."""
        async with self._lock:
            wait_time = self._next_slot - time.monotonic()
            if wait_time > 0:
                logger.debug(f"{self.api_name}: waiting {wait_time:.2f}s before next request")
                await asyncio.sleep(wait_time)
            self._next_slot = time.monotonic() + self.min_delay_seconds

"""HTTP client for the OJP 2.0 stop event API."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import TYPE_CHECKING

import aiohttp

from sbb_departures.adapters.api_rate_limiter import ApiRateLimiter
from sbb_departures.adapters.api_request_logger import log_api_request
from sbb_departures.adapters.ojp_api.constants import (
    OJP_API_MIN_DELAY_SECONDS,
    OJP_ENDPOINT,
    OJP_REQUESTOR_REF,
)
from sbb_departures.adapters.ojp_api.request_builder import build_stop_event_request
from sbb_departures.domain.errors import ConfigurationError, UpstreamTransportError

if TYPE_CHECKING:
    from aiohttp import ClientSession

logger = logging.getLogger(__name__)


class OjpHttpClient:
    """Posts stop event requests and returns the raw XML response."""

    def __init__(
        self,
        session: ClientSession,
        api_key: str | None,
        endpoint: str = OJP_ENDPOINT,
        requestor_ref: str = OJP_REQUESTOR_REF,
        timeout_seconds: float = 15.0,
    ) -> None:
        """Initialize the client.

        Args:
            session: Shared aiohttp session.
            api_key: Bearer token for the OJP API.
            endpoint: OJP 2.0 endpoint URL.
            requestor_ref: RequestorRef sent with each request.
            timeout_seconds: Total timeout per request.

        Raises:
            ConfigurationError: If no API key is given.
        """
        if not api_key:
            raise ConfigurationError("OJP API key is not configured")
        self._session = session
        self._api_key = api_key
        self._endpoint = endpoint
        self._requestor_ref = requestor_ref
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._rate_limiter = ApiRateLimiter.for_api("ojp_api", OJP_API_MIN_DELAY_SECONDS)

    async def fetch_stop_events(
        self, didok_id: str, limit: int = 15, when: datetime | None = None
    ) -> str:
        """Fetch upcoming departures at a stop place.

        Args:
            didok_id: DiDok number of the stop place.
            limit: Number of stop events requested.
            when: Request timestamp; defaults to now.

        Returns:
            Raw XML response body.
        """
        body = build_stop_event_request(didok_id, limit, self._requestor_ref, when)
        headers = {
            "Content-Type": "application/xml",
            "Authorization": f"Bearer {self._api_key}",
        }
        await self._rate_limiter.acquire()
        log_api_request("POST", self._endpoint, headers=headers, body=body)

        try:
            async with self._session.post(
                self._endpoint, data=body.encode("utf-8"), headers=headers, timeout=self._timeout
            ) as response:
                text = await response.text()
                if response.status != 200:
                    logger.error(f"OJP API returned status {response.status}: {text[:200]}")
                    raise UpstreamTransportError(
                        f"OJP API returned status ({response.status})",
                        status_code=response.status,
                    )
                return text
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise UpstreamTransportError(f"OJP API request failed: {e}") from e

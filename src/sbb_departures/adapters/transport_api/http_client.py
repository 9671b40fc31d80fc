"""HTTP client for the transport.opendata.ch schedule API."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

import aiohttp

from sbb_departures.adapters.api_rate_limiter import ApiRateLimiter
from sbb_departures.adapters.api_request_logger import log_api_request
from sbb_departures.adapters.transport_api.constants import (
    CONNECTIONS_PATH,
    DEFAULT_HEADERS,
    STATIONBOARD_PATH,
    TRANSPORT_API_MIN_DELAY_SECONDS,
    TRANSPORT_BASE_URL,
)
from sbb_departures.domain.errors import UpstreamProtocolError, UpstreamTransportError

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession

logger = logging.getLogger(__name__)

QueryParams = list[tuple[str, str]]


class TransportHttpClient:
    """Fetches raw JSON payloads from transport.opendata.ch."""

    def __init__(
        self,
        session: ClientSession,
        base_url: str = TRANSPORT_BASE_URL,
        timeout_seconds: float = 15.0,
    ) -> None:
        """Initialize with an aiohttp session.

        Args:
            session: Shared aiohttp session.
            base_url: API base URL, without trailing slash.
            timeout_seconds: Total timeout per request.
        """
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._rate_limiter = ApiRateLimiter.for_api(
            "transport_api", TRANSPORT_API_MIN_DELAY_SECONDS
        )

    async def fetch_stationboard(
        self, station: str, limit: int, when: datetime | None = None
    ) -> dict[str, Any]:
        """Fetch the departure board of a station.

        Args:
            station: Station name, e.g. "Aarau".
            limit: Maximum number of departures.
            when: Optional start of the board (local wall time of the station).

        Returns:
            Raw ``{"station": ..., "stationboard": [...]}`` payload.
        """
        params: QueryParams = [("station", station), ("limit", str(limit))]
        if when is not None:
            params.append(("datetime", when.strftime("%Y-%m-%d %H:%M")))
        payload = await self._get_json(STATIONBOARD_PATH, params)
        if not isinstance(payload.get("stationboard"), list):
            raise UpstreamProtocolError(f"Stationboard response for {station} has no stationboard")
        return payload

    async def fetch_connections(
        self,
        origin: str,
        destination: str,
        via: list[str] | None = None,
        limit: int = 3,
        time: str | None = None,
        date: str | None = None,
    ) -> dict[str, Any]:
        """Fetch planned connections between two stations.

        Args:
            origin: Departure station name.
            destination: Arrival station name.
            via: Stations the itinerary must pass, sent as repeated ``via[]``.
            limit: Maximum number of connections.
            time: Optional departure time ``HH:MM``.
            date: Optional departure date ``YYYY-MM-DD``.

        Returns:
            Raw ``{"connections": [...], "from": ..., "to": ...}`` payload.
        """
        params: QueryParams = [("from", origin), ("to", destination), ("limit", str(limit))]
        params.extend(("via[]", station) for station in via or [])
        if time:
            params.append(("time", time))
        if date:
            params.append(("date", date))
        payload = await self._get_json(CONNECTIONS_PATH, params)
        if not isinstance(payload.get("connections"), list):
            raise UpstreamProtocolError(
                f"Connections response {origin} -> {destination} has no connections"
            )
        return payload

    async def _get_json(self, path: str, params: QueryParams) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        await self._rate_limiter.acquire()
        log_api_request("GET", url, params=params, headers=DEFAULT_HEADERS)

        try:
            async with self._session.get(
                url, params=params, headers=DEFAULT_HEADERS, timeout=self._timeout
            ) as response:
                return await self._handle_response(response, url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise UpstreamTransportError(f"Transport API request to {url} failed: {e}") from e

    async def _handle_response(self, response: ClientResponse, url: str) -> dict[str, Any]:
        if response.status != 200:
            body = await response.text()
            logger.error(f"Transport API returned status {response.status} for {url}: {body[:200]}")
            raise UpstreamTransportError(
                f"Transport API returned status ({response.status}) for {url}",
                status_code=response.status,
            )

        try:
            payload = await response.json(content_type=None)
        except ValueError as e:
            raise UpstreamProtocolError(f"Transport API returned invalid JSON for {url}") from e

        if not isinstance(payload, dict):
            kind = type(payload).__name__
            raise UpstreamProtocolError(f"Transport API returned {kind} for {url}")
        return payload

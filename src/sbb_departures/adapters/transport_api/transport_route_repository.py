"""Route repository backed by transport.opendata.ch."""

import logging

from sbb_departures.adapters.transport_api.http_client import TransportHttpClient
from sbb_departures.adapters.transport_api.journey_parser import parse_connections
from sbb_departures.domain.models import ConnectionsResponse
from sbb_departures.domain.ports import RouteRepository

logger = logging.getLogger(__name__)


class TransportRouteRepository(RouteRepository):
    """Planned itineraries from the JSON schedule API."""

    def __init__(self, client: TransportHttpClient) -> None:
        self._client = client

    async def get_connections(
        self,
        origin: str,
        destination: str,
        via: list[str] | None = None,
        limit: int = 3,
        direct_only: bool = False,
    ) -> ConnectionsResponse:
        payload = await self._client.fetch_connections(origin, destination, via=via, limit=limit)
        response = parse_connections(payload, direct_only=direct_only)
        logger.debug(
            f"Fetched {len(response.connections)} connection(s) {origin} -> {destination}"
        )
        return response

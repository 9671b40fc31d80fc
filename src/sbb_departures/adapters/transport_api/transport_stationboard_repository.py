"""Stationboard repository backed by transport.opendata.ch."""

from datetime import datetime

from sbb_departures.adapters.transport_api.http_client import TransportHttpClient
from sbb_departures.adapters.transport_api.journey_parser import parse_stationboard
from sbb_departures.domain.models import StationboardResponse
from sbb_departures.domain.ports import StationboardRepository


class TransportStationboardRepository(StationboardRepository):
    """Departure boards from the JSON schedule API."""

    def __init__(self, client: TransportHttpClient) -> None:
        self._client = client

    async def get_stationboard(
        self,
        station_name: str,
        limit: int = 15,
        when: datetime | None = None,
    ) -> StationboardResponse:
        payload = await self._client.fetch_stationboard(station_name, limit, when)
        return parse_stationboard(payload)

"""Stationboard repository combining OJP stop events with the JSON category board.

The XML only carries a free-text line name, so the JSON board of the same station is
fetched in parallel and used as a departure-minute lookup for category and number.
"""

import asyncio
import logging
from datetime import datetime

from sbb_departures.adapters.ojp_api.http_client import OjpHttpClient
from sbb_departures.adapters.ojp_api.stop_event_parser import parse_stop_event_response
from sbb_departures.adapters.transport_api.journey_parser import build_category_map
from sbb_departures.domain.models import CategoryMap, StationboardResponse
from sbb_departures.domain.models.corridor import DIDOK_STATION_IDS
from sbb_departures.domain.ports import StationboardRepository

logger = logging.getLogger(__name__)


class OjpStationboardRepository(StationboardRepository):
    """Realtime departure boards from OJP, enriched with line identities."""

    def __init__(
        self,
        client: OjpHttpClient,
        category_repository: StationboardRepository | None = None,
    ) -> None:
        """Initialize the repository.

        Args:
            client: OJP HTTP client.
            category_repository: Board source for the category lookup, usually the
                transport API. Without one, categories come from the XML line names.
        """
        self._client = client
        self._category_repository = category_repository

    async def get_stationboard(
        self,
        station_name: str,
        limit: int = 15,
        when: datetime | None = None,
    ) -> StationboardResponse:
        didok_id = DIDOK_STATION_IDS.get(station_name)
        if didok_id is None:
            raise ValueError(f"Unknown station: {station_name}")

        category_map, xml_text = await asyncio.gather(
            self._fetch_category_map(station_name, limit * 2, when),
            self._client.fetch_stop_events(didok_id, limit, when),
        )
        return parse_stop_event_response(xml_text, station_name, category_map)

    async def _fetch_category_map(
        self, station_name: str, limit: int, when: datetime | None
    ) -> CategoryMap:
        if self._category_repository is None:
            return {}
        try:
            board = await self._category_repository.get_stationboard(station_name, limit, when)
        except Exception as e:
            logger.warning(f"Category lookup for {station_name} failed, using line names: {e}")
            return {}
        return build_category_map(board.stationboard)

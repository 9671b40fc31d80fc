"""Stationboard repository port."""

from datetime import datetime
from typing import Protocol

from sbb_departures.domain.models.responses import StationboardResponse


class StationboardRepository(Protocol):
    """Port for retrieving the departure board of a station."""

    async def get_stationboard(
        self,
        station_name: str,
        limit: int = 15,
        when: datetime | None = None,
    ) -> StationboardResponse:
        """Get upcoming departures at a station, in chronological order."""
        ...

"""Top-level upstream response shapes."""

from pydantic import Field

from sbb_departures.domain.models.base import CanonicalModel
from sbb_departures.domain.models.connection import Connection
from sbb_departures.domain.models.journey import Journey
from sbb_departures.domain.models.station import Station


class StationboardResponse(CanonicalModel):
    """Board of upcoming departures at one station."""

    station: Station | None = None
    stationboard: list[Journey] = []


class ConnectionsResponse(CanonicalModel):
    """Planned itineraries between two stations."""

    connections: list[Connection] = []
    from_: Station | None = Field(default=None, alias="from")
    to: Station | None = None

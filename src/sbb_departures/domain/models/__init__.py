"""Domain models for SBB departures."""

from sbb_departures.domain.models.connection import Connection, Section
from sbb_departures.domain.models.corridor import CorridorRoute
from sbb_departures.domain.models.direction import Direction, RefreshTier
from sbb_departures.domain.models.error_details import ErrorDetails
from sbb_departures.domain.models.journey import Journey, JourneyDetails
from sbb_departures.domain.models.journey_with_connection import JourneyWithConnection
from sbb_departures.domain.models.line_identity import CategoryMap, LineIdentity
from sbb_departures.domain.models.responses import ConnectionsResponse, StationboardResponse
from sbb_departures.domain.models.station import Coordinate, Station
from sbb_departures.domain.models.stop import ConnectionStop, Prognosis, Stop
from sbb_departures.domain.models.train_position import TrainPosition

__all__ = [
    "CategoryMap",
    "Connection",
    "ConnectionStop",
    "ConnectionsResponse",
    "Coordinate",
    "CorridorRoute",
    "Direction",
    "ErrorDetails",
    "Journey",
    "JourneyDetails",
    "JourneyWithConnection",
    "LineIdentity",
    "Prognosis",
    "RefreshTier",
    "Section",
    "Station",
    "StationboardResponse",
    "Stop",
    "TrainPosition",
]

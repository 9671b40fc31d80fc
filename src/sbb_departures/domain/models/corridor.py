"""Static reference data for the Muhen - Aarau - Zürich HB corridor.

Upstream XML rarely carries coordinates, so known stations are resolved by name.
"""

from dataclasses import dataclass

from sbb_departures.domain.models.direction import Direction
from sbb_departures.domain.models.station import Coordinate, Station

ORIGIN_STATION = "Muhen"
TRANSFER_STATION = "Aarau"
TERMINUS_STATION = "Zürich HB"

# DiDok numbers used for OJP stop event requests
DIDOK_STATION_IDS: dict[str, str] = {
    "Muhen": "8502195",
    "Aarau": "8502113",
    "Zürich HB": "8503000",
}

# (lat, lon) of stations along the corridor
STATION_COORDINATES: dict[str, tuple[float, float]] = {
    "Muhen": (47.347164, 8.046361),
    "Schöftland": (47.303611, 8.049444),
    "Schöftland Nordweg": (47.306389, 8.051389),
    "Hirschthal": (47.298056, 8.053611),
    "Obermuhen": (47.322222, 8.052778),
    "Mittelmuhen": (47.333056, 8.050000),
    "Untermuhen": (47.343611, 8.049167),
    "Aarau": (47.391361, 8.051284),
    "Zürich HB": (47.378177, 8.540192),
    "Basel SBB": (47.547408, 7.589548),
    "Bern": (46.949076, 7.439136),
    "Lenzburg": (47.385833, 8.176944),
    "Zofingen": (47.287778, 7.946944),
    "Olten": (47.350278, 7.906389),
    "Suhr": (47.372500, 8.078056),
}

# Board header coordinates; any station other than Muhen/Aarau uses the Zürich HB entry
_BOARD_COORDINATES: dict[str, tuple[float, float]] = {
    "Muhen": (47.347164, 8.046361),
    "Aarau": (47.391361, 8.051284),
}
_BOARD_DEFAULT_COORDINATE = (47.377847, 8.540502)

# Endpoints of synthesized connections; unknown names resolve to Aarau
_CONNECTION_ENDPOINTS: dict[str, tuple[str, tuple[float, float]]] = {
    "Zürich HB": ("8503000", (47.377847, 8.540502)),
    "Muhen": ("8502211", (47.363889, 8.043056)),
}
_CONNECTION_DEFAULT_ENDPOINT = ("8502113", (47.391361, 8.051284))


def _coordinate(position: tuple[float, float] | None) -> Coordinate:
    if position is None:
        return Coordinate()
    return Coordinate(x=position[0], y=position[1])


def stop_coordinate(station_name: str | None) -> Coordinate:
    """Coordinate of a calling point, empty when the station is unknown."""
    if not station_name:
        return Coordinate()
    return _coordinate(STATION_COORDINATES.get(station_name))


def board_station(station_name: str) -> Station:
    """Header station of a board fetched for ``station_name``."""
    position = _BOARD_COORDINATES.get(station_name, _BOARD_DEFAULT_COORDINATE)
    return Station(
        id=DIDOK_STATION_IDS.get(station_name, ""),
        name=station_name,
        coordinate=_coordinate(position),
    )


def connection_endpoint(station_name: str) -> Station:
    """Station used for the ends of a synthesized connection."""
    station_id, position = _CONNECTION_ENDPOINTS.get(station_name, _CONNECTION_DEFAULT_ENDPOINT)
    return Station(id=station_id, name=station_name, coordinate=_coordinate(position))


@dataclass(frozen=True)
class CorridorRoute:
    """Origin, transfer and destination stations for one direction."""

    origin: str
    transfer: str
    destination: str

    @classmethod
    def for_direction(cls, direction: Direction) -> "CorridorRoute":
        if direction is Direction.TO_ZURICH:
            return cls(ORIGIN_STATION, TRANSFER_STATION, TERMINUS_STATION)
        return cls(TERMINUS_STATION, TRANSFER_STATION, ORIGIN_STATION)

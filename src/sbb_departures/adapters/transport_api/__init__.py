"""Adapter for the transport.opendata.ch schedule API."""

from sbb_departures.adapters.transport_api.http_client import TransportHttpClient
from sbb_departures.adapters.transport_api.journey_parser import (
    build_category_map,
    parse_connections,
    parse_stationboard,
)
from sbb_departures.adapters.transport_api.transport_route_repository import (
    TransportRouteRepository,
)
from sbb_departures.adapters.transport_api.transport_stationboard_repository import (
    TransportStationboardRepository,
)

__all__ = [
    "TransportHttpClient",
    "TransportRouteRepository",
    "TransportStationboardRepository",
    "build_category_map",
    "parse_connections",
    "parse_stationboard",
]

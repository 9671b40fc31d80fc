"""Adapter for the OJP 2.0 stop event API."""

from sbb_departures.adapters.ojp_api.http_client import OjpHttpClient
from sbb_departures.adapters.ojp_api.ojp_stationboard_repository import (
    OjpStationboardRepository,
)
from sbb_departures.adapters.ojp_api.request_builder import build_stop_event_request
from sbb_departures.adapters.ojp_api.stop_event_parser import parse_stop_event_response

__all__ = [
    "OjpHttpClient",
    "OjpStationboardRepository",
    "build_stop_event_request",
    "parse_stop_event_response",
]

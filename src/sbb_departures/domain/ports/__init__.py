"""Ports (interfaces) for the ports-and-adapters architecture."""

from sbb_departures.domain.ports.position_estimator import PositionEstimator
from sbb_departures.domain.ports.route_repository import RouteRepository
from sbb_departures.domain.ports.schedule_aggregator import ScheduleAggregator
from sbb_departures.domain.ports.stationboard_repository import StationboardRepository

__all__ = [
    "PositionEstimator",
    "RouteRepository",
    "ScheduleAggregator",
    "StationboardRepository",
]

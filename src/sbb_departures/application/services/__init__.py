"""Application services."""

from sbb_departures.application.services.board_cache import BoundedBoardCache
from sbb_departures.application.services.connection_matcher import ConnectionMatcher
from sbb_departures.application.services.retry_policy import RetryPolicy
from sbb_departures.application.services.schedule_aggregator import (
    AggregatorSettings,
    ScheduleAggregator,
    synthesize_route_journeys,
)
from sbb_departures.application.services.train_position_estimator import (
    TrainPositionEstimator,
    estimate_position,
    is_running,
)

__all__ = [
    "AggregatorSettings",
    "BoundedBoardCache",
    "ConnectionMatcher",
    "RetryPolicy",
    "ScheduleAggregator",
    "TrainPositionEstimator",
    "estimate_position",
    "is_running",
    "synthesize_route_journeys",
]

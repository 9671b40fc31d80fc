"""Train position estimator port."""

from datetime import datetime
from typing import Protocol

from sbb_departures.domain.models.stop import Stop
from sbb_departures.domain.models.train_position import TrainPosition


class PositionEstimator(Protocol):
    """Port for locating a train along its pass list."""

    def estimate_position(self, pass_list: list[Stop], now: datetime) -> TrainPosition | None:
        """Interpolated position at ``now``, None when it cannot be determined."""
        ...

    def is_running(self, pass_list: list[Stop], now: datetime) -> bool:
        """Whether the train is between its first departure and last arrival."""
        ...

"""Train position domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TrainPosition:
    """Interpolated position of a train along its pass list."""

    lat: float
    lon: float
    progress: float  # 0..1 between current_stop and next_stop
    current_stop: str
    next_stop: str
    is_moving: bool

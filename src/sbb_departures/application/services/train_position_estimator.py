"""Estimate where a train is by interpolating between scheduled stops."""

from datetime import datetime, timedelta
from typing import NamedTuple

from sbb_departures.domain.models.stop import Stop
from sbb_departures.domain.models.train_position import TrainPosition
from sbb_departures.domain.ports.position_estimator import PositionEstimator
from sbb_departures.domain.timing import optional_epoch_ms, to_epoch_ms

ARRIVAL_BUFFER_MS = 60_000
RUNNING_FALLBACK_WINDOW = timedelta(hours=1)
UNKNOWN_STOP = "Unknown"


class _Waypoint(NamedTuple):
    name: str
    lat: float
    lon: float
    arrival_ms: int | None
    departure_ms: int | None


def _waypoints(pass_list: list[Stop]) -> list[_Waypoint]:
    """Stops with a known coordinate, in travel order."""
    waypoints = []
    for stop in pass_list:
        if not stop.station.has_position:
            continue
        coordinate = stop.station.coordinate
        waypoints.append(
            _Waypoint(
                name=stop.station.name or UNKNOWN_STOP,
                lat=coordinate.x,
                lon=coordinate.y,
                arrival_ms=optional_epoch_ms(stop.arrival),
                departure_ms=optional_epoch_ms(stop.departure),
            )
        )
    return waypoints


def _stationary(at: _Waypoint, next_name: str, progress: float, is_moving: bool) -> TrainPosition:
    return TrainPosition(
        lat=at.lat,
        lon=at.lon,
        progress=progress,
        current_stop=at.name,
        next_stop=next_name,
        is_moving=is_moving,
    )


def estimate_position(pass_list: list[Stop], now: datetime) -> TrainPosition | None:
    """Interpolate the train position at ``now``.

    Only stops with a known coordinate take part. Returns None when fewer than
    two such stops exist. Segments with a missing departure or arrival are skipped.
    """
    waypoints = _waypoints(pass_list)
    if len(waypoints) < 2:
        return None

    now_ms = to_epoch_ms(now)

    for current, following in zip(waypoints, waypoints[1:], strict=False):
        if current.departure_ms is None or following.arrival_ms is None:
            continue
        if not current.departure_ms <= now_ms <= following.arrival_ms + ARRIVAL_BUFFER_MS:
            continue

        duration = following.arrival_ms - current.departure_ms
        progress = (now_ms - current.departure_ms) / duration if duration > 0 else 0.0
        progress = min(max(progress, 0.0), 1.0)
        return TrainPosition(
            lat=current.lat + (following.lat - current.lat) * progress,
            lon=current.lon + (following.lon - current.lon) * progress,
            progress=progress,
            current_stop=current.name,
            next_stop=following.name,
            is_moving=True,
        )

    first, second, last = waypoints[0], waypoints[1], waypoints[-1]

    if first.departure_ms is not None and now_ms < first.departure_ms:
        return _stationary(first, second.name, progress=0.0, is_moving=False)

    if last.arrival_ms is not None and now_ms > last.arrival_ms:
        return _stationary(last, last.name, progress=1.0, is_moving=False)

    # Departed but no segment matched: gap in the data
    return _stationary(first, second.name, progress=0.0, is_moving=True)


def is_running(pass_list: list[Stop], now: datetime) -> bool:
    """Whether ``now`` lies between the first departure and the last arrival.

    Without a final arrival the train counts as running for one hour after departure.
    """
    timed = [stop for stop in pass_list if stop.departure or stop.arrival]
    if not timed or not timed[0].departure:
        return False

    start_ms = to_epoch_ms(timed[0].departure)
    last_arrival = optional_epoch_ms(timed[-1].arrival)
    if last_arrival is None:
        end_ms = start_ms + RUNNING_FALLBACK_WINDOW // timedelta(milliseconds=1)
    else:
        end_ms = last_arrival
    return start_ms <= to_epoch_ms(now) <= end_ms


class TrainPositionEstimator(PositionEstimator):
    """Position estimator backed by the module functions."""

    def estimate_position(self, pass_list: list[Stop], now: datetime) -> TrainPosition | None:
        return estimate_position(pass_list, now)

    def is_running(self, pass_list: list[Stop], now: datetime) -> bool:
        return is_running(pass_list, now)

"""Match onward connections at the transfer station against its departure board."""

import logging
from datetime import timedelta

from sbb_departures.domain.models.connection import Connection
from sbb_departures.domain.models.corridor import TRANSFER_STATION, connection_endpoint
from sbb_departures.domain.models.journey import Journey
from sbb_departures.domain.models.stop import ConnectionStop, Prognosis
from sbb_departures.domain.timing import MS_PER_MINUTE, optional_epoch_ms, to_epoch_ms

logger = logging.getLogger(__name__)

MIN_TRANSFER_MINUTES = 4
MAX_CONNECTIONS = 3


def format_duration(milliseconds: int) -> str:
    """Format a duration the way the transport API does, e.g. ``00d00:28:00``."""
    total_seconds = max(milliseconds, 0) // 1000
    days, remainder = divmod(total_seconds, 86_400)
    hours, remainder = divmod(remainder, 3_600)
    minutes, seconds = divmod(remainder, 60)
    return f"{days:02d}d{hours:02d}:{minutes:02d}:{seconds:02d}"


class ConnectionMatcher:
    """Filters a transfer-station board down to plausible onward connections."""

    def __init__(
        self,
        transfer_station: str = TRANSFER_STATION,
        min_transfer_minutes: int = MIN_TRANSFER_MINUTES,
        max_connections: int = MAX_CONNECTIONS,
    ) -> None:
        """Initialize the matcher.

        Args:
            transfer_station: Station where riders change trains.
            min_transfer_minutes: Minimum time between arrival and onward departure.
            max_connections: Maximum number of connections returned per arrival.
        """
        self.transfer_station = transfer_station
        self.min_transfer_ms = min_transfer_minutes * MS_PER_MINUTE
        self.max_connections = max_connections

    def find_connections(
        self,
        transfer_arrival: str,
        destination: str,
        candidate_board: list[Journey],
    ) -> list[Connection]:
        """Find up to ``max_connections`` onward journeys reaching ``destination``.

        Candidates keep the board order (chronological by departure); the first
        matches win.

        Args:
            transfer_arrival: ISO arrival time at the transfer station.
            destination: Name of the rider's destination station.
            candidate_board: Departure board of the transfer station.

        Returns:
            Connections in board order.
        """
        arrival_ms = to_epoch_ms(transfer_arrival)
        matches = [
            journey
            for journey in candidate_board
            if self._is_plausible(journey, arrival_ms, destination)
        ]
        logger.debug(
            f"{len(matches)} candidate(s) from {self.transfer_station} to {destination} "
            f"after arrival {transfer_arrival}"
        )
        selected = matches[: self.max_connections]
        return [self._to_connection(journey, destination) for journey in selected]

    def _is_plausible(self, journey: Journey, arrival_ms: int, destination: str) -> bool:
        destination_stop = journey.find_stop(destination)
        if destination not in journey.to and destination_stop is None:
            return False

        departure_ms = optional_epoch_ms(journey.stop.departure)
        if departure_ms is None:
            return False
        if departure_ms - arrival_ms < self.min_transfer_ms:
            return False

        # Reject services that call at the destination before the transfer station
        if destination_stop is not None:
            reached_ms = optional_epoch_ms(destination_stop.arrival or destination_stop.departure)
            if reached_ms is not None and reached_ms <= departure_ms:
                return False

        return True

    def _to_connection(self, journey: Journey, destination: str) -> Connection:
        destination_stop = journey.find_stop(destination)
        reached = None
        platform = None
        if destination_stop is not None:
            reached = destination_stop.arrival or destination_stop.departure
            platform = destination_stop.platform

        departure = journey.stop.departure
        duration = None
        if departure and reached:
            duration = format_duration(to_epoch_ms(reached) - to_epoch_ms(departure))

        return Connection(
            from_=ConnectionStop(
                station=connection_endpoint(self.transfer_station),
                departure=departure,
                delay=journey.stop.delay,
                platform=journey.stop.platform,
                prognosis=journey.stop.prognosis,
            ),
            to=ConnectionStop(
                station=connection_endpoint(destination),
                arrival=reached,
                platform=platform,
                prognosis=Prognosis(),
            ),
            duration=duration,
            transfers=0,
            products=[journey.product_label],
            final_destination=journey.to,
        )

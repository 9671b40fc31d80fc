"""Schedule aggregator: one refresh cycle per direction, with caches and retries."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sbb_departures.application.services.board_cache import BoundedBoardCache
from sbb_departures.application.services.connection_matcher import ConnectionMatcher
from sbb_departures.application.services.error_classifier import extract_error_details
from sbb_departures.application.services.retry_policy import RetryPolicy
from sbb_departures.domain.errors import ConfigurationError
from sbb_departures.domain.models.connection import Connection, Section
from sbb_departures.domain.models.corridor import CorridorRoute
from sbb_departures.domain.models.direction import Direction, RefreshTier
from sbb_departures.domain.models.journey_with_connection import JourneyWithConnection
from sbb_departures.domain.models.stop import Stop

if TYPE_CHECKING:
    from sbb_departures.domain.contracts.state_updater import StateUpdaterProtocol
    from sbb_departures.domain.models.journey import Journey
    from sbb_departures.domain.models.responses import ConnectionsResponse
    from sbb_departures.domain.ports import RouteRepository, StationboardRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregatorSettings:
    """Fetch sizes and cache bounds for a refresh cycle."""

    origin_board_limit: int = 15
    transfer_board_limit_full: int = 100
    transfer_board_limit_quick: int = 30
    route_limit: int = 15
    # Quick refreshes a full-refresh cache may serve before a refetch is forced
    max_cached_quick_cycles: int | None = 5


class ScheduleAggregator:
    """Builds the journey list for one direction and publishes it.

    Owns the transfer-board cache, the inbound route cache, the in-flight guard,
    and the retry counter. A new instance is created whenever the direction
    changes; after ``deactivate()`` any result still in flight is discarded.
    """

    def __init__(
        self,
        direction: Direction,
        stationboard_repository: StationboardRepository,
        route_repository: RouteRepository,
        state_updater: StateUpdaterProtocol,
        settings: AggregatorSettings | None = None,
        matcher: ConnectionMatcher | None = None,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        """Initialize the aggregator.

        Args:
            direction: Direction this instance serves.
            stationboard_repository: Source of departure boards.
            route_repository: Source of planned itineraries (inbound direction).
            state_updater: Receives journeys, errors and loading flags.
            settings: Fetch limits and cache bounds.
            matcher: Connection matcher for the outbound direction.
            retry_policy: Backoff for automatic retries.
            sleep: Awaitable used to wait before a retry.
            clock: Source of the last-update timestamp.
        """
        self.direction = direction
        self.route = CorridorRoute.for_direction(direction)
        self.settings = settings or AggregatorSettings()
        self.matcher = matcher or ConnectionMatcher(transfer_station=self.route.transfer)
        self.retry_policy = retry_policy or RetryPolicy()
        self._stationboards = stationboard_repository
        self._routes = route_repository
        self._state_updater = state_updater
        self._sleep = sleep
        self._clock = clock

        max_uses = self.settings.max_cached_quick_cycles
        self._transfer_cache: BoundedBoardCache[list[Journey]] = BoundedBoardCache(
            f"{self.route.transfer} board", max_uses
        )
        self._route_cache: BoundedBoardCache[list[JourneyWithConnection]] = BoundedBoardCache(
            f"{self.route.origin} route", max_uses
        )
        self._active = True
        self._in_flight = False
        self._failure_count = 0
        self._retry_task: asyncio.Task | None = None
        self.last_error: str | None = None
        self.terminal_error: ConfigurationError | None = None
        self.on_terminal_error: Callable[[ConfigurationError], None] | None = None

    @property
    def active(self) -> bool:
        return self._active

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def failure_count(self) -> int:
        return self._failure_count

    @property
    def retry_task(self) -> asyncio.Task | None:
        return self._retry_task

    def deactivate(self) -> None:
        """Stop serving this direction: cancel retries, reset counters, drop caches."""
        self._active = False
        self._cancel_retry()
        self._failure_count = 0
        self._transfer_cache.clear()
        self._route_cache.clear()
        logger.info(f"Deactivated aggregator for {self.direction}")

    async def refresh(self, tier: RefreshTier) -> list[JourneyWithConnection] | None:
        """Run one refresh cycle and publish the result.

        Overlapping requests are dropped, not queued. Failures are recorded and
        feed the retry policy; the previously published journeys stay in place.

        Returns:
            The published journeys, or None if the cycle was skipped, failed,
            or finished after the aggregator was deactivated.

        Raises:
            ConfigurationError: The process is misconfigured; never retried.
        """
        if not self._active:
            logger.debug(f"Ignoring {tier} refresh for inactive direction {self.direction}")
            return None
        if self._in_flight:
            logger.info(f"Refresh already in flight for {self.direction}, dropping {tier} request")
            return None

        self._in_flight = True
        if tier is RefreshTier.FULL:
            self._state_updater.update_loading(True)
        try:
            if self.direction is Direction.TO_ZURICH:
                journeys = await self._refresh_outbound(tier)
            else:
                journeys = await self._refresh_inbound(tier)
        except ConfigurationError as e:
            logger.critical(f"Configuration error, refresh stopped: {e}")
            self.terminal_error = e
            self._record_error(str(e))
            raise
        except Exception as e:
            self._handle_failure(e, tier)
            return None
        finally:
            self._in_flight = False
            if self._active:
                self._state_updater.update_loading(False)

        if not self._active:
            logger.info(f"Discarding late {tier} result for inactive direction {self.direction}")
            return None

        self._failure_count = 0
        self._record_error(None)
        self._state_updater.update_journeys(self.direction, journeys)
        self._state_updater.update_last_update_time(self._clock())
        logger.info(f"{tier} refresh for {self.direction} published {len(journeys)} journey(s)")
        return journeys

    async def _refresh_outbound(self, tier: RefreshTier) -> list[JourneyWithConnection]:
        """Origin board joined with connections matched on the transfer board."""
        board = await self._stationboards.get_stationboard(
            self.route.origin, limit=self.settings.origin_board_limit
        )
        feeders = [journey for journey in board.stationboard if self._arrives_at_transfer(journey)]
        logger.debug(
            f"{len(feeders)} of {len(board.stationboard)} departures from {self.route.origin} "
            f"reach {self.route.transfer}"
        )

        transfer_board: list[Journey] = []
        if feeders:
            transfer_board = await self._get_transfer_board(tier)

        return [self._with_connections(journey, transfer_board) for journey in feeders]

    def _arrives_at_transfer(self, journey: Journey) -> bool:
        stop = journey.find_stop(self.route.transfer)
        return stop is not None and stop.arrival is not None

    async def _get_transfer_board(self, tier: RefreshTier) -> list[Journey]:
        if tier is RefreshTier.QUICK:
            if self._transfer_cache.exhausted:
                logger.info(f"{self._transfer_cache.name} cache reached its quick-cycle bound")
                tier = RefreshTier.FULL
            else:
                cached = self._transfer_cache.get()
                if cached is not None:
                    logger.info(f"Quick refresh: using cached {self._transfer_cache.name}")
                    return cached

        if tier is RefreshTier.FULL:
            limit = self.settings.transfer_board_limit_full
        else:
            limit = self.settings.transfer_board_limit_quick
        logger.info(f"{tier} refresh: fetching {self.route.transfer} board (limit={limit})")
        response = await self._stationboards.get_stationboard(self.route.transfer, limit=limit)

        if tier is RefreshTier.FULL and self._active:
            self._transfer_cache.set(response.stationboard)
        return response.stationboard

    def _with_connections(
        self, journey: Journey, transfer_board: list[Journey]
    ) -> JourneyWithConnection:
        transfer_stop = journey.find_stop(self.route.transfer)
        arrival = transfer_stop.arrival if transfer_stop else None

        connections: list[Connection] = []
        if arrival and transfer_board:
            connections = self.matcher.find_connections(
                arrival, self.route.destination, transfer_board
            )

        return JourneyWithConnection.from_journey(
            journey,
            aarau_arrival=arrival,
            aarau_platform=transfer_stop.platform if transfer_stop else None,
            aarau_prognosis_platform=transfer_stop.prognosis.platform if transfer_stop else None,
            connections=connections or None,
        )

    async def _refresh_inbound(self, tier: RefreshTier) -> list[JourneyWithConnection]:
        """Two-section itineraries from the route planner, served from cache on quick cycles."""
        if tier is RefreshTier.QUICK:
            if self._route_cache.exhausted:
                logger.info(f"{self._route_cache.name} cache reached its quick-cycle bound")
            else:
                cached = self._route_cache.get()
                if cached is not None:
                    logger.info(f"Quick refresh: using cached {self._route_cache.name}")
                    return cached

        logger.info(
            f"Fetching connections {self.route.origin} -> {self.route.destination} "
            f"via {self.route.transfer}"
        )
        response = await self._routes.get_connections(
            self.route.origin,
            self.route.destination,
            via=[self.route.transfer],
            limit=self.settings.route_limit,
        )
        journeys = synthesize_route_journeys(response)

        if self._active:
            self._route_cache.set(journeys)
        return journeys

    def _handle_failure(self, error: Exception, tier: RefreshTier) -> None:
        details = extract_error_details(error)
        if not self._active:
            logger.info(f"Ignoring failure for inactive direction {self.direction}: {error}")
            return

        logger.error(
            f"{tier} refresh for {self.direction} failed: "
            f"{details.reason} (status: {details.status_code}, error: {error})"
        )
        if details.status_code == 429:
            logger.warning("Rate limit (429) detected - consider longer refresh intervals")
        self._record_error(str(error) or details.reason)
        self._schedule_retry(tier)

    def _record_error(self, message: str | None) -> None:
        self.last_error = message
        if self._active:
            self._state_updater.update_error(message)

    def _schedule_retry(self, tier: RefreshTier) -> None:
        self._cancel_retry()
        if not self.retry_policy.can_retry(self._failure_count):
            logger.warning(
                f"Max retries ({self.retry_policy.max_attempts}) reached for {self.direction}, "
                "waiting for the next scheduled refresh"
            )
            return

        self._failure_count += 1
        delay = self.retry_policy.delay_for(self._failure_count)
        logger.info(
            f"Scheduling retry {self._failure_count}/{self.retry_policy.max_attempts} "
            f"in {delay:g}s"
        )
        self._retry_task = asyncio.create_task(self._retry_after(delay, tier))

    async def _retry_after(self, delay: float, tier: RefreshTier) -> None:
        await self._sleep(delay)
        self._retry_task = None
        logger.info(f"Retrying {tier} refresh (attempt {self._failure_count})")
        try:
            await self.refresh(tier)
        except ConfigurationError as e:
            logger.error("Retry stopped by configuration error")
            if self.on_terminal_error is not None:
                self.on_terminal_error(e)

    def _cancel_retry(self) -> None:
        task = self._retry_task
        self._retry_task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()


def _departure_stop(stop: Stop) -> Stop:
    return stop.model_copy(update={"arrival": None})


def _arrival_stop(stop: Stop) -> Stop:
    return stop.model_copy(update={"departure": None})


def _synthesize_route_journey(
    first: Section, second: Section, duration: str | None
) -> JourneyWithConnection | None:
    details = first.journey
    if details is None:
        return None

    stop = Stop(
        station=first.departure.station,
        departure=first.departure.departure,
        delay=first.departure.delay,
        platform=first.departure.platform,
        prognosis=first.departure.prognosis,
    )

    connections = None
    if second.journey is not None:
        connections = [
            Connection(
                from_=_departure_stop(second.departure),
                to=_arrival_stop(second.arrival),
                duration=duration,
                transfers=0,
                products=[second.journey.product_label],
                sections=[second],
                final_destination=second.journey.to,
            )
        ]

    return JourneyWithConnection(
        **dict(details),
        stop=stop,
        aarau_arrival=first.arrival.arrival,
        aarau_platform=first.arrival.platform,
        aarau_prognosis_platform=first.arrival.prognosis.platform,
        connections=connections,
    )


def synthesize_route_journeys(response: ConnectionsResponse) -> list[JourneyWithConnection]:
    """Turn terminus -> transfer -> origin itineraries into board journeys.

    The first section becomes the primary journey, the second its single onward
    connection. Itineraries with fewer than two sections, or starting with a walk,
    are skipped.
    """
    journeys = []
    for connection in response.connections:
        if len(connection.sections) < 2:
            continue
        first, second = connection.sections[0], connection.sections[1]
        journey = _synthesize_route_journey(first, second, connection.duration)
        if journey is not None:
            journeys.append(journey)
    return journeys

"""Polling scheduler driving quick and full refreshes for the active direction."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from sbb_departures.domain.contracts.polling_scheduler import PollingSchedulerProtocol
from sbb_departures.domain.errors import ConfigurationError
from sbb_departures.domain.models.direction import Direction, RefreshTier

if TYPE_CHECKING:
    from sbb_departures.adapters.web.updaters.state_updater import StateUpdater
    from sbb_departures.domain.ports import ScheduleAggregator

logger = logging.getLogger(__name__)

AggregatorFactory = Callable[[Direction], "ScheduleAggregator"]


class PollingScheduler(PollingSchedulerProtocol):
    """Runs the quick and full refresh intervals for one board.

    Exactly one aggregator is active at a time. Intervals run as asyncio tasks and
    are suspended while the board is hidden.
    """

    def __init__(
        self,
        aggregator_factory: AggregatorFactory,
        state_updater: StateUpdater,
        quick_interval_seconds: float = 30,
        full_interval_seconds: float = 180,
        initial_direction: Direction = Direction.TO_ZURICH,
    ) -> None:
        """Initialize the scheduler.

        Args:
            aggregator_factory: Creates the aggregator for a direction.
            state_updater: Updater for the board state.
            quick_interval_seconds: Seconds between quick refreshes.
            full_interval_seconds: Seconds between full refreshes.
            initial_direction: Direction shown after start.
        """
        self.aggregator_factory = aggregator_factory
        self.state_updater = state_updater
        self.quick_interval_seconds = quick_interval_seconds
        self.full_interval_seconds = full_interval_seconds
        self._direction = initial_direction
        self._aggregator: ScheduleAggregator | None = None
        self._running = False
        self._visible = True
        self._loop_tasks: list[asyncio.Task] = []
        self._refresh_tasks: set[asyncio.Task] = set()
        self.terminal_error: ConfigurationError | None = None
        self.state_updater.board_state.direction = initial_direction

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def aggregator(self) -> ScheduleAggregator | None:
        return self._aggregator

    @property
    def running(self) -> bool:
        return self._running

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def polling(self) -> bool:
        """Whether interval tasks are currently scheduled."""
        return any(not task.done() for task in self._loop_tasks)

    @property
    def pending_refreshes(self) -> tuple[asyncio.Task, ...]:
        """Immediate refreshes that have been triggered but not finished."""
        return tuple(self._refresh_tasks)

    async def start(self) -> None:
        """Start polling with an immediate full refresh.

        The refresh runs even while the board is hidden; only the intervals wait
        for it to become visible.
        """
        if self._running:
            logger.warning("Polling scheduler already running")
            return
        if self.terminal_error is not None:
            logger.error(f"Not starting polling, terminal error: {self.terminal_error}")
            return

        self._running = True
        if self._aggregator is None:
            self._aggregator = self._create_aggregator(self._direction)
        logger.info(f"Polling scheduler started for {self._direction}")
        if self._visible:
            self._resume()
        else:
            self._trigger(RefreshTier.FULL)

    async def stop(self) -> None:
        """Stop polling, cancel pending refreshes and retries."""
        self._running = False
        await self._cancel_loops()
        for task in list(self._refresh_tasks):
            task.cancel()
        await asyncio.gather(*self._refresh_tasks, return_exceptions=True)
        if self._aggregator is not None:
            self._aggregator.deactivate()
            self._aggregator = None
        logger.info("Stopped polling scheduler")

    async def set_visible(self, visible: bool) -> None:
        """Pause while hidden; refresh immediately and resume when visible.

        Args:
            visible: Whether a client is currently looking at the board.
        """
        if visible == self._visible:
            return
        self._visible = visible
        if not self._running:
            return

        if visible:
            logger.info("Board visible, resuming refreshes")
            self._resume()
        else:
            logger.info("Board hidden, pausing refreshes")
            await self._cancel_loops()

    async def toggle_direction(self) -> Direction:
        """Switch direction, resetting caches and retries.

        The new direction is fetched right away, visible or not.

        Returns:
            The new direction.
        """
        new_direction = self._direction.toggled()
        if self._aggregator is not None:
            self._aggregator.deactivate()

        self._direction = new_direction
        self.state_updater.begin_direction_change(new_direction)
        logger.info(f"Direction changed to {new_direction}")

        if not self._running:
            self._aggregator = None
            return new_direction

        self._aggregator = self._create_aggregator(new_direction)
        if self._visible:
            await self._cancel_loops()
            self._resume()
        else:
            self._trigger(RefreshTier.FULL)
        return new_direction

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready view of the current board state."""
        return self.state_updater.board_state.to_wire()

    async def refresh_now(self, tier: RefreshTier) -> None:
        """Run one refresh of the active aggregator.

        A configuration error stops polling for good and is kept as terminal error;
        all other failures are handled by the aggregator.
        """
        aggregator = self._aggregator
        if aggregator is None or self.terminal_error is not None:
            return
        try:
            await aggregator.refresh(tier)
        except ConfigurationError as e:
            self._halt(e)

    def _create_aggregator(self, direction: Direction) -> ScheduleAggregator:
        aggregator = self.aggregator_factory(direction)
        aggregator.on_terminal_error = self._halt
        return aggregator

    def _resume(self) -> None:
        self._trigger(RefreshTier.FULL)
        quick = self._interval_loop(RefreshTier.QUICK, self.quick_interval_seconds)
        full = self._interval_loop(RefreshTier.FULL, self.full_interval_seconds)
        self._loop_tasks = [asyncio.create_task(quick), asyncio.create_task(full)]

    def _trigger(self, tier: RefreshTier) -> None:
        task = asyncio.create_task(self.refresh_now(tier))
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)

    async def _interval_loop(self, tier: RefreshTier, interval_seconds: float) -> None:
        try:
            while True:
                await asyncio.sleep(interval_seconds)
                logger.debug(f"{tier} interval fired for {self._direction}")
                await self.refresh_now(tier)
        except asyncio.CancelledError:
            logger.debug(f"{tier} interval cancelled")
            raise

    async def _cancel_loops(self) -> None:
        tasks, self._loop_tasks = self._loop_tasks, []
        current = asyncio.current_task()
        others = [task for task in tasks if task is not current]
        for task in others:
            task.cancel()
        await asyncio.gather(*others, return_exceptions=True)

    def _halt(self, error: ConfigurationError) -> None:
        if self.terminal_error is not None:
            return
        logger.critical(f"Polling stopped: {error}")
        self.terminal_error = error
        self._running = False
        self.state_updater.update_terminal_error(str(error))
        tasks, self._loop_tasks = self._loop_tasks, []
        for task in tasks:
            task.cancel()

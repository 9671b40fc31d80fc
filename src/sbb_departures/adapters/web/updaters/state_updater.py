"""Updater for board state."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sbb_departures.adapters.web.state.board_state import (
    BoardState,  # noqa: TC001 - Runtime dependency: used in __init__
)
from sbb_departures.domain.contracts.state_updater import StateUpdaterProtocol

if TYPE_CHECKING:
    from datetime import datetime

    from sbb_departures.domain.models.direction import Direction
    from sbb_departures.domain.models.journey_with_connection import JourneyWithConnection

logger = logging.getLogger(__name__)


class StateUpdater(StateUpdaterProtocol):
    """Updates board state."""

    def __init__(self, board_state: BoardState) -> None:
        """Initialize the state updater.

        Args:
            board_state: The BoardState instance to update.
        """
        self.board_state = board_state

    def update_journeys(
        self, direction: Direction, journeys: list[JourneyWithConnection]
    ) -> None:
        """Replace the journeys if they belong to the current direction.

        Args:
            direction: The direction the journeys were fetched for.
            journeys: Journeys with their onward connections.
        """
        if direction is not self.board_state.direction:
            logger.info(f"Discarding {len(journeys)} journeys for stale direction {direction}")
            return
        self.board_state.journeys = journeys
        self.board_state.api_status = "success"
        logger.debug(f"Updated journeys: {len(journeys)} for {direction}")

    def update_loading(self, loading: bool) -> None:
        """Update the loading flag; a finished refresh also ends a direction change."""
        self.board_state.loading = loading
        if not loading:
            self.board_state.is_direction_changing = False

    def update_error(self, message: str | None) -> None:
        """Record the most recent error message, or clear it with None."""
        self.board_state.error = message
        if message is not None:
            self.board_state.api_status = "error"
            logger.debug(f"Updated error: {message}")

    def update_last_update_time(self, time: datetime) -> None:
        """Update the last update timestamp in the state.

        Args:
            time: The timestamp of the last update.
        """
        self.board_state.last_update = time
        logger.debug(f"Updated last update time: {time}")

    def begin_direction_change(self, direction: Direction) -> None:
        """Switch the shown direction; journeys of the old direction are dropped."""
        self.board_state.direction = direction
        self.board_state.is_direction_changing = True
        self.board_state.journeys = []
        self.board_state.error = None
        self.board_state.loading = True

    def update_terminal_error(self, message: str) -> None:
        """Record an error that stopped polling."""
        self.board_state.terminal_error = message
        self.board_state.error = message
        self.board_state.api_status = "error"
        self.board_state.loading = False
        logger.debug(f"Updated terminal error: {message}")

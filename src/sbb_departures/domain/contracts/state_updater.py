"""Protocol for updating board state."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import datetime

    from sbb_departures.domain.models.direction import Direction
    from sbb_departures.domain.models.journey_with_connection import JourneyWithConnection


class StateUpdaterProtocol(Protocol):
    """Protocol for updating board state."""

    def update_journeys(
        self, direction: "Direction", journeys: list["JourneyWithConnection"]
    ) -> None:
        """Replace the journeys shown for a direction.

        Args:
            direction: The direction the journeys were fetched for.
            journeys: Journeys with their onward connections.
        """
        ...

    def update_loading(self, loading: bool) -> None:
        """Update the loading flag."""
        ...

    def update_error(self, message: str | None) -> None:
        """Record the most recent error message, or clear it with None."""
        ...

    def update_last_update_time(self, time: "datetime") -> None:
        """Update the last update timestamp in the state.

        Args:
            time: The timestamp of the last update.
        """
        ...

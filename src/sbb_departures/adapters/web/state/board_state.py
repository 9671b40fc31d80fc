"""Board state dataclass."""

from dataclasses import dataclass, field
from datetime import datetime

from sbb_departures.domain.models.direction import Direction
from sbb_departures.domain.models.journey_with_connection import JourneyWithConnection


@dataclass
class BoardState:
    """State of the departure board served to clients."""

    journeys: list[JourneyWithConnection] = field(default_factory=list)
    loading: bool = True
    error: str | None = None
    last_update: datetime | None = None
    direction: Direction = Direction.TO_ZURICH
    is_direction_changing: bool = False
    api_status: str = "unknown"  # "success" or "error" after the first refresh
    # Set when polling stopped for good, e.g. missing credentials
    terminal_error: str | None = None

    def to_wire(self) -> dict:
        """JSON-ready representation for the web API."""
        return {
            "journeys": [journey.to_wire() for journey in self.journeys],
            "loading": self.loading,
            "error": self.error,
            "lastUpdate": self.last_update.isoformat() if self.last_update else None,
            "direction": self.direction.value,
            "isDirectionChanging": self.is_direction_changing,
            "apiStatus": self.api_status,
            "terminalError": self.terminal_error,
        }

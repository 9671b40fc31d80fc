"""Schedule aggregator port."""

from collections.abc import Callable
from typing import Protocol

from sbb_departures.domain.errors import ConfigurationError
from sbb_departures.domain.models.direction import Direction, RefreshTier
from sbb_departures.domain.models.journey_with_connection import JourneyWithConnection


class ScheduleAggregator(Protocol):
    """Port for the per-direction refresh cycle driven by the polling scheduler."""

    direction: Direction
    # Called when a refresh the caller did not await (a retry) hits a configuration error
    on_terminal_error: Callable[[ConfigurationError], None] | None

    async def refresh(self, tier: RefreshTier) -> list[JourneyWithConnection] | None:
        """Run one refresh cycle. Returns None when the cycle was skipped or failed."""
        ...

    def deactivate(self) -> None:
        """Cancel pending retries and drop caches; late results are discarded."""
        ...

"""Protocol for the polling scheduler."""

from typing import Protocol

from sbb_departures.domain.models.direction import Direction


class PollingSchedulerProtocol(Protocol):
    """Protocol for driving refreshes on quick and full intervals."""

    async def start(self) -> None:
        """Start polling with an immediate full refresh."""
        ...

    async def stop(self) -> None:
        """Stop polling and cancel pending retries."""
        ...

    async def set_visible(self, visible: bool) -> None:
        """Pause while hidden; refresh immediately and resume when visible."""
        ...

    async def toggle_direction(self) -> Direction:
        """Switch direction, resetting caches and retries."""
        ...

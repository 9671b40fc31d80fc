"""Route-planning repository port."""

from typing import Protocol

from sbb_departures.domain.models.responses import ConnectionsResponse


class RouteRepository(Protocol):
    """Port for planning itineraries between two stations."""

    async def get_connections(
        self,
        origin: str,
        destination: str,
        via: list[str] | None = None,
        limit: int = 3,
        direct_only: bool = False,
    ) -> ConnectionsResponse:
        """Get planned connections from origin to destination."""
        ...

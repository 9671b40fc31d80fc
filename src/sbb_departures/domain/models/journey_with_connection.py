"""Journey enriched with transfer-station details and onward connections."""

from sbb_departures.domain.models.connection import Connection
from sbb_departures.domain.models.journey import Journey


class JourneyWithConnection(Journey):
    """A board journey plus its arrival at Aarau and up to three onward connections."""

    aarau_arrival: str | None = None
    aarau_platform: str | None = None
    aarau_prognosis_platform: str | None = None
    connections: list[Connection] | None = None

    @classmethod
    def from_journey(cls, journey: Journey, **extra: object) -> "JourneyWithConnection":
        """Extend an existing board journey with transfer details."""
        return cls(**dict(journey), **extra)

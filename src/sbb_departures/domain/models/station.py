"""Station domain model."""

from sbb_departures.domain.models.base import CanonicalModel


class Coordinate(CanonicalModel):
    """WGS84 position. ``x`` is latitude, ``y`` is longitude."""

    type: str = "WGS84"
    x: float | None = None
    y: float | None = None

    @property
    def has_position(self) -> bool:
        return self.x is not None and self.y is not None


class Station(CanonicalModel):
    """Represents a public transport station."""

    id: str | None = None
    name: str | None = None
    score: float | None = None
    coordinate: Coordinate | None = None
    distance: float | None = None

    @property
    def has_position(self) -> bool:
        return self.coordinate is not None and self.coordinate.has_position

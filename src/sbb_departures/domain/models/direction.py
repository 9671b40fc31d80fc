"""Direction and refresh tier enums."""

from enum import StrEnum


class Direction(StrEnum):
    """Travel direction along the corridor."""

    TO_ZURICH = "toZurich"
    TO_MUHEN = "toMuhen"

    def toggled(self) -> "Direction":
        return Direction.TO_MUHEN if self is Direction.TO_ZURICH else Direction.TO_ZURICH


class RefreshTier(StrEnum):
    """Refresh cadence: quick prefers caches, full refetches everything."""

    QUICK = "quick"
    FULL = "full"

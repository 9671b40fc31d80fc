"""Journey domain models."""

from typing import Any

from pydantic import field_validator

from sbb_departures.domain.models.base import CanonicalModel
from sbb_departures.domain.models.stop import Stop


class JourneyDetails(CanonicalModel):
    """Line identity and calling pattern of one service run.

    ``pass_list`` is in travel order; a station appears at most once.
    """

    name: str = ""
    category: str = ""
    subcategory: str | None = None
    number: str = ""
    operator: str | None = None
    to: str = ""
    pass_list: list[Stop] = []

    @field_validator("name", "category", "number", "to", mode="before")
    @classmethod
    def _text_or_empty(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, int | float):
            return str(value)
        return value

    @field_validator("pass_list", mode="before")
    @classmethod
    def _null_pass_list_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def find_stop(self, station_name: str) -> Stop | None:
        """First pass list entry calling at the named station."""
        for stop in self.pass_list:
            if stop.station.name == station_name:
                return stop
        return None

    @property
    def product_label(self) -> str:
        return f"{self.category} {self.number}"


class Journey(JourneyDetails):
    """A departure board entry: the service plus its stop at the board station."""

    stop: Stop

"""Stop and prognosis domain models."""

from typing import Any

from pydantic import computed_field, field_validator

from sbb_departures.domain.models.base import CanonicalModel
from sbb_departures.domain.models.station import Station
from sbb_departures.domain.timing import optional_epoch_ms


class Prognosis(CanonicalModel):
    """Realtime overrides. Estimated values supersede scheduled ones when present."""

    platform: str | None = None
    arrival: str | None = None
    departure: str | None = None
    capacity1st: int | None = None
    capacity2nd: int | None = None


class Stop(CanonicalModel):
    """A single stop event of a service at a station.

    ``arrival``/``departure`` already carry the realtime value when one is known;
    the epoch timestamps are always derived from them in milliseconds.
    """

    station: Station
    arrival: str | None = None
    departure: str | None = None
    delay: int = 0
    platform: str | None = None
    prognosis: Prognosis = Prognosis()

    @field_validator("delay", mode="before")
    @classmethod
    def _missing_delay_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("platform", mode="before")
    @classmethod
    def _platform_as_text(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return str(value)

    @computed_field(alias="arrivalTimestamp")  # type: ignore[prop-decorator]
    @property
    def arrival_timestamp(self) -> int | None:
        return optional_epoch_ms(self.arrival)

    @computed_field(alias="departureTimestamp")  # type: ignore[prop-decorator]
    @property
    def departure_timestamp(self) -> int | None:
        return optional_epoch_ms(self.departure)


# Stops inside a connection use the same shape; departure may be absent at the target.
ConnectionStop = Stop

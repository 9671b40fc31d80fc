"""Connection domain models."""

from pydantic import Field

from sbb_departures.domain.models.base import CanonicalModel
from sbb_departures.domain.models.journey import JourneyDetails
from sbb_departures.domain.models.stop import ConnectionStop


class Section(CanonicalModel):
    """One leg of a planned itinerary. ``journey`` is None for walks."""

    journey: JourneyDetails | None = None
    departure: ConnectionStop
    arrival: ConnectionStop


class Connection(CanonicalModel):
    """A transfer option from the transfer station to the rider's destination.

    ``final_destination`` is the true terminus of the service, which may lie
    beyond the rider's destination.
    """

    from_: ConnectionStop = Field(alias="from")
    to: ConnectionStop
    duration: str | None = None
    transfers: int = 0
    products: list[str] = []
    sections: list[Section] = []
    final_destination: str | None = None

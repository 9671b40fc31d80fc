"""Display formatters."""

from sbb_departures.adapters.web.formatters.departure_formatter import (
    DepartureFormatter,
    TimeStatus,
)

__all__ = ["DepartureFormatter", "TimeStatus"]

"""Pollers that drive refreshes."""

from sbb_departures.adapters.web.pollers.polling_scheduler import PollingScheduler

__all__ = ["PollingScheduler"]

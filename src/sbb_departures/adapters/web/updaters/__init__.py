"""State updaters."""

from sbb_departures.adapters.web.updaters.state_updater import StateUpdater

__all__ = ["StateUpdater"]

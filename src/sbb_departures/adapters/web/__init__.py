"""Web adapter: polling scheduler, board state and the JSON API."""

from sbb_departures.adapters.web.app import WebAdapter

__all__ = ["WebAdapter"]

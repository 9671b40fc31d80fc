"""Board state shared between the scheduler and the web routes."""

from sbb_departures.adapters.web.state.board_state import BoardState

__all__ = ["BoardState"]

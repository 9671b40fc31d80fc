"""Tests for the Starlette web adapter handlers."""

import json
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from builders import at, make_journey, make_stop
from sbb_departures.adapters.config import AppConfig
from sbb_departures.adapters.web import WebAdapter
from sbb_departures.adapters.web.formatters import DepartureFormatter
from sbb_departures.adapters.web.state import BoardState
from sbb_departures.adapters.web.updaters import StateUpdater
from sbb_departures.domain.models import Direction, JourneyWithConnection, TrainPosition

NOW = datetime(2025, 1, 6, 9, 0, tzinfo=UTC)


@pytest.fixture
def board_state() -> BoardState:
    journey = make_journey(
        "S",
        "14",
        "Aarau",
        [
            make_stop("Muhen", departure=at(10, 5)),
            make_stop("Suhr", arrival=at(10, 12), departure=at(10, 13)),
            make_stop("Aarau", arrival=at(10, 20)),
        ],
    )
    return BoardState(journeys=[JourneyWithConnection.from_journey(journey)], loading=False)


@pytest.fixture
def scheduler(board_state: BoardState) -> MagicMock:
    scheduler = MagicMock()
    scheduler.state_updater = StateUpdater(board_state)
    scheduler.snapshot = board_state.to_wire
    scheduler.toggle_direction = AsyncMock(return_value=Direction.TO_MUHEN)
    scheduler.set_visible = AsyncMock()
    return scheduler


@pytest.fixture
def estimator() -> MagicMock:
    estimator = MagicMock()
    estimator.estimate_position.return_value = None
    estimator.is_running.return_value = False
    return estimator


@pytest.fixture
def adapter(scheduler: MagicMock, estimator: MagicMock) -> WebAdapter:
    config = AppConfig.for_testing()
    return WebAdapter(
        config, scheduler, DepartureFormatter(config), estimator, clock=lambda: NOW
    )


def _request(body: object = None, path_params: dict | None = None) -> MagicMock:
    request = MagicMock()
    if isinstance(body, Exception):
        request.json = AsyncMock(side_effect=body)
    else:
        request.json = AsyncMock(return_value=body)
    request.path_params = path_params or {}
    return request


def test_build_app_registers_routes(adapter: WebAdapter) -> None:
    """Given the adapter, when building the app, then all API routes are registered."""
    app = adapter.build_app()

    paths = {route.path for route in app.routes}
    assert paths == {
        "/api/state",
        "/api/direction/toggle",
        "/api/visibility",
        "/api/journeys/{index:int}/position",
        "/healthz",
    }


@pytest.mark.asyncio
async def test_get_state_adds_display_fields(adapter: WebAdapter) -> None:
    """Given a board with one journey, when reading state, then display fields are included."""
    response = await adapter.get_state(_request())

    body = json.loads(response.body)
    assert body["direction"] == "toZurich"
    assert body["loading"] is False
    journey = body["journeys"][0]
    assert journey["category"] == "S"
    assert journey["display"]["departureTime"] == "10:05"
    assert journey["display"]["minutesUntil"] == 5
    assert journey["display"]["timeStatus"]["color"] == "#FF8C00"


@pytest.mark.asyncio
async def test_toggle_direction_returns_new_direction(
    adapter: WebAdapter, scheduler: MagicMock
) -> None:
    """Given a board, when toggling the direction, then the new direction is returned."""
    response = await adapter.toggle_direction(_request())

    assert json.loads(response.body) == {"direction": "toMuhen"}
    scheduler.toggle_direction.assert_awaited_once()


@pytest.mark.asyncio
async def test_set_visibility_forwards_flag(adapter: WebAdapter, scheduler: MagicMock) -> None:
    """Given a visibility body, when posting it, then the scheduler is told."""
    response = await adapter.set_visibility(_request({"visible": False}))

    assert response.status_code == 200
    assert json.loads(response.body) == {"visible": False}
    scheduler.set_visible.assert_awaited_once_with(False)


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"visible": "yes"}, {}, ["visible"]])
async def test_set_visibility_rejects_non_boolean(
    adapter: WebAdapter, scheduler: MagicMock, body: object
) -> None:
    """Given a body without a boolean flag, when posting it, then 400 is returned."""
    response = await adapter.set_visibility(_request(body))

    assert response.status_code == 400
    assert json.loads(response.body) == {"error": "'visible' must be a boolean"}
    scheduler.set_visible.assert_not_awaited()


@pytest.mark.asyncio
async def test_set_visibility_rejects_invalid_json(adapter: WebAdapter) -> None:
    """Given a malformed body, when posting it, then 400 is returned."""
    error = json.JSONDecodeError("Expecting value", "{", 1)

    response = await adapter.set_visibility(_request(error))

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_journey_position_unknown_index(adapter: WebAdapter) -> None:
    """Given an index past the board, when asking for a position, then 404 is returned."""
    response = await adapter.get_journey_position(_request(path_params={"index": 3}))

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_journey_position_before_departure(
    adapter: WebAdapter, estimator: MagicMock
) -> None:
    """Given a train not yet running, when asking for a position, then position is null."""
    response = await adapter.get_journey_position(_request(path_params={"index": 0}))

    assert json.loads(response.body) == {"journey": "S 14", "isRunning": False, "position": None}
    estimator.estimate_position.assert_called_once()


@pytest.mark.asyncio
async def test_journey_position_while_running(adapter: WebAdapter, estimator: MagicMock) -> None:
    """Given a running train, when asking for a position, then the estimate is returned."""
    estimator.is_running.return_value = True
    estimator.estimate_position.return_value = TrainPosition(
        lat=47.37, lon=8.06, progress=0.5, current_stop="Muhen", next_stop="Suhr", is_moving=True
    )

    response = await adapter.get_journey_position(_request(path_params={"index": 0}))

    body = json.loads(response.body)
    assert body["isRunning"] is True
    assert body["position"] == {
        "lat": 47.37,
        "lon": 8.06,
        "progress": 0.5,
        "currentStop": "Muhen",
        "nextStop": "Suhr",
        "isMoving": True,
    }


@pytest.mark.asyncio
async def test_healthz(adapter: WebAdapter) -> None:
    """Given the adapter, when probing health, then Ok is returned as plain text."""
    response = await adapter.healthz(_request())

    assert response.body == b"Ok"
    assert response.media_type == "text/plain"

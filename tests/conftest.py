"""Shared fixtures for the corridor: boards at Muhen and Aarau, a planned return trip."""

from pathlib import Path

import pytest
from builders import (
    FakeRouteRepository,
    FakeStationboardRepository,
    RecordingStateUpdater,
    at,
    make_journey,
    make_route_connection,
    make_section,
    make_stop,
)

from sbb_departures.adapters.api_rate_limiter import ApiRateLimiter
from sbb_departures.domain.models import ConnectionsResponse, Journey, JourneyDetails


@pytest.fixture(autouse=True)
def reset_rate_limiters() -> None:
    """Shared rate limiters must not leak waiting time between tests."""
    ApiRateLimiter.reset()


@pytest.fixture
def muhen_board() -> list[Journey]:
    """Departures at Muhen: one S14 via Aarau and one bus that never reaches Aarau."""
    return [
        make_journey(
            "S",
            "14",
            "Aarau",
            [
                make_stop("Muhen", departure=at(10, 5), platform="1"),
                make_stop("Suhr", arrival=at(10, 12), departure=at(10, 12)),
                make_stop("Aarau", arrival=at(10, 20), platform="6", prognosis_platform="7"),
            ],
        ),
        make_journey(
            "B",
            "1",
            "Hirschthal",
            [
                make_stop("Muhen", departure=at(10, 8)),
                make_stop("Hirschthal", arrival=at(10, 15)),
            ],
        ),
    ]


@pytest.fixture
def aarau_board() -> list[Journey]:
    """Departures at Aarau in board order."""
    return [
        make_journey(
            "IR",
            "16",
            "Zürich HB",
            [
                make_stop("Aarau", departure=at(10, 23), platform="3"),
                make_stop("Zürich HB", arrival=at(10, 55), platform="12"),
            ],
        ),
        make_journey(
            "IR",
            "36",
            "Zürich HB",
            [
                make_stop("Aarau", departure=at(10, 24), platform="4"),
                make_stop("Zürich HB", arrival=at(10, 56), platform="13"),
            ],
        ),
        make_journey(
            "RE",
            "7",
            "Olten",
            [
                make_stop("Aarau", departure=at(10, 26)),
                make_stop("Olten", arrival=at(10, 40)),
            ],
        ),
        make_journey(
            "IC",
            "5",
            "St. Gallen",
            [
                make_stop("Aarau", departure=at(10, 30), platform="5"),
                make_stop("Zürich HB", arrival=at(10, 55), departure=at(10, 58), platform="16"),
                make_stop("St. Gallen", arrival=at(12, 0)),
            ],
        ),
    ]


@pytest.fixture
def return_trip() -> ConnectionsResponse:
    """Zürich HB -> Aarau -> Muhen itineraries, plus two that cannot be shown."""
    first = make_section(
        JourneyDetails(category="IR", number="36", operator="SBB", to="Basel SBB"),
        make_stop("Zürich HB", departure=at(10, 4), platform="31"),
        make_stop("Aarau", arrival=at(10, 30), platform="4", prognosis_platform="5"),
    )
    second = make_section(
        JourneyDetails(category="S", number="14", operator="SBB", to="Schöftland"),
        make_stop("Aarau", arrival=at(10, 30), departure=at(10, 37), platform="7"),
        make_stop("Muhen", arrival=at(10, 49), departure=at(10, 50), platform="1"),
    )
    walk_first = make_section(
        None,
        make_stop("Zürich HB", departure=at(10, 10)),
        make_stop("Zürich HB", arrival=at(10, 14)),
    )
    direct = make_section(
        JourneyDetails(category="IC", number="3", to="Basel SBB"),
        make_stop("Zürich HB", departure=at(10, 32)),
        make_stop("Aarau", arrival=at(10, 58)),
    )
    return ConnectionsResponse(
        connections=[
            make_route_connection([first, second], duration="00d00:45:00"),
            make_route_connection([walk_first, first, second]),
            make_route_connection([direct]),
        ]
    )


@pytest.fixture
def stationboard_repository(
    muhen_board: list[Journey], aarau_board: list[Journey]
) -> FakeStationboardRepository:
    return FakeStationboardRepository({"Muhen": muhen_board, "Aarau": aarau_board})


@pytest.fixture
def route_repository(return_trip: ConnectionsResponse) -> FakeRouteRepository:
    return FakeRouteRepository(return_trip)


@pytest.fixture
def state_updater() -> RecordingStateUpdater:
    return RecordingStateUpdater()


@pytest.fixture
def stop_event_xml() -> str:
    """OJP delivery with an S14 from Muhen (all call lists) and a bare extra train."""
    return (Path(__file__).parent / "data" / "stop_event_response.xml").read_text(encoding="utf-8")

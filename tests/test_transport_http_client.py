"""Tests for the transport.opendata.ch HTTP client with a mocked aiohttp session."""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from sbb_departures.adapters.transport_api import (
    TransportHttpClient,
    TransportRouteRepository,
    TransportStationboardRepository,
)
from sbb_departures.domain.errors import UpstreamProtocolError, UpstreamTransportError


def _session(status: int = 200, payload: object = None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=payload)
    response.text = AsyncMock(return_value=text)
    session = MagicMock()
    session.get.return_value.__aenter__.return_value = response
    return session


@pytest.mark.asyncio
async def test_fetch_stationboard_sends_station_limit_and_datetime() -> None:
    """Given a board request with a start time, when fetching, then query parameters are sent."""
    session = _session(payload={"station": None, "stationboard": []})
    client = TransportHttpClient(session, "https://transport.example/v1/")

    payload = await client.fetch_stationboard("Aarau", 30, datetime(2025, 1, 6, 10, 24))

    assert payload == {"station": None, "stationboard": []}
    args, kwargs = session.get.call_args
    assert args[0] == "https://transport.example/v1/stationboard"
    assert kwargs["params"] == [
        ("station", "Aarau"),
        ("limit", "30"),
        ("datetime", "2025-01-06 10:24"),
    ]


@pytest.mark.asyncio
async def test_fetch_connections_repeats_via_parameter() -> None:
    """Given via stations, when fetching connections, then each is sent as via[]."""
    session = _session(payload={"connections": []})
    client = TransportHttpClient(session)

    await client.fetch_connections("Zürich HB", "Muhen", via=["Aarau", "Suhr"], limit=15)

    _, kwargs = session.get.call_args
    assert kwargs["params"] == [
        ("from", "Zürich HB"),
        ("to", "Muhen"),
        ("limit", "15"),
        ("via[]", "Aarau"),
        ("via[]", "Suhr"),
    ]


@pytest.mark.asyncio
async def test_non_200_status_is_transport_error_with_status_code() -> None:
    """Given a 429 response, when fetching, then a transport error carries the status."""
    client = TransportHttpClient(_session(status=429, text="Too Many Requests"))

    with pytest.raises(UpstreamTransportError) as exc_info:
        await client.fetch_stationboard("Aarau", 15)

    assert exc_info.value.status_code == 429


@pytest.mark.asyncio
async def test_network_failure_is_transport_error() -> None:
    """Given a connection failure, when fetching, then a transport error without status results."""
    session = MagicMock()
    session.get.side_effect = aiohttp.ClientConnectionError("connection refused")
    client = TransportHttpClient(session)

    with pytest.raises(UpstreamTransportError) as exc_info:
        await client.fetch_connections("Zürich HB", "Muhen")

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_invalid_json_is_protocol_error() -> None:
    """Given a body that is not JSON, when fetching, then a protocol error is raised."""
    session = _session()
    response = session.get.return_value.__aenter__.return_value
    response.json = AsyncMock(side_effect=ValueError("no json"))
    client = TransportHttpClient(session)

    with pytest.raises(UpstreamProtocolError):
        await client.fetch_stationboard("Aarau", 15)


@pytest.mark.asyncio
async def test_missing_top_level_list_is_protocol_error() -> None:
    """Given a payload without connections, when fetching, then a protocol error is raised."""
    client = TransportHttpClient(_session(payload={"errors": [{"message": "bad"}]}))

    with pytest.raises(UpstreamProtocolError):
        await client.fetch_connections("Zürich HB", "Muhen")


@pytest.mark.asyncio
async def test_repositories_parse_client_payloads() -> None:
    """Given mocked client payloads, when using the repositories, then domain models return."""
    client = MagicMock()
    client.fetch_stationboard = AsyncMock(return_value={"stationboard": []})
    client.fetch_connections = AsyncMock(return_value={"connections": []})

    board = await TransportStationboardRepository(client).get_stationboard("Aarau", limit=30)
    routes = await TransportRouteRepository(client).get_connections(
        "Zürich HB", "Muhen", via=["Aarau"], limit=15
    )

    assert board.stationboard == []
    assert routes.connections == []
    client.fetch_stationboard.assert_awaited_once_with("Aarau", 30, None)
    client.fetch_connections.assert_awaited_once_with(
        "Zürich HB", "Muhen", via=["Aarau"], limit=15
    )

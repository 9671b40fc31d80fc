"""Normalize transport.opendata.ch payloads into domain models.

The JSON payloads are already shaped like the domain models, so parsing is a
validation pass plus the direct-only filter and the category lookup table.
"""

import logging
from typing import Any

from pydantic import ValidationError

from sbb_departures.domain.errors import UpstreamProtocolError
from sbb_departures.domain.models import (
    CategoryMap,
    ConnectionsResponse,
    Journey,
    LineIdentity,
    StationboardResponse,
)
from sbb_departures.domain.models.line_identity import DEFAULT_CATEGORY
from sbb_departures.domain.timing import minute_key

logger = logging.getLogger(__name__)


def parse_stationboard(payload: dict[str, Any]) -> StationboardResponse:
    """Validate a raw stationboard payload.

    Args:
        payload: Raw ``{"station": ..., "stationboard": [...]}`` dict.

    Returns:
        StationboardResponse with journeys in upstream (chronological) order.

    Raises:
        UpstreamProtocolError: If the payload does not match the expected shape.
    """
    try:
        return StationboardResponse.model_validate(payload)
    except ValidationError as e:
        raise UpstreamProtocolError(f"Unexpected stationboard payload: {e}") from e


def parse_connections(payload: dict[str, Any], direct_only: bool = False) -> ConnectionsResponse:
    """Validate a raw connections payload.

    Args:
        payload: Raw ``{"connections": [...], "from": ..., "to": ...}`` dict.
        direct_only: Keep only connections without transfers.

    Returns:
        ConnectionsResponse.

    Raises:
        UpstreamProtocolError: If the payload does not match the expected shape.
    """
    try:
        response = ConnectionsResponse.model_validate(payload)
    except ValidationError as e:
        raise UpstreamProtocolError(f"Unexpected connections payload: {e}") from e

    if not direct_only:
        return response

    direct = [connection for connection in response.connections if connection.transfers == 0]
    logger.debug(f"Kept {len(direct)} of {len(response.connections)} direct connection(s)")
    return response.model_copy(update={"connections": direct})


def build_category_map(journeys: list[Journey]) -> CategoryMap:
    """Index line identities by departure minute.

    Journeys without a departure time are skipped. When two journeys leave in the
    same minute the first one wins.
    """
    category_map: CategoryMap = {}
    for journey in journeys:
        departure = journey.stop.departure
        if not departure:
            continue
        category_map.setdefault(
            minute_key(departure),
            LineIdentity(journey.category or DEFAULT_CATEGORY, journey.number or ""),
        )
    return category_map

"""Parse OJP 2.0 stop event deliveries into domain journeys.

Elements are matched by local name so that namespace prefixes chosen by the
upstream (``siri:``, ``ojp:``, default namespace) do not matter.
"""

import logging
import re
import xml.etree.ElementTree as ET

from sbb_departures.adapters.ojp_api.constants import DEFAULT_OPERATOR
from sbb_departures.domain.errors import UpstreamProtocolError
from sbb_departures.domain.models import (
    CategoryMap,
    Journey,
    LineIdentity,
    Prognosis,
    Station,
    StationboardResponse,
    Stop,
)
from sbb_departures.domain.models.corridor import board_station, stop_coordinate
from sbb_departures.domain.models.line_identity import DEFAULT_CATEGORY
from sbb_departures.domain.timing import calculate_delay, minute_key

logger = logging.getLogger(__name__)

_ENVELOPE_PATH = ("OJPResponse", "ServiceDelivery", "OJPStopEventDelivery")
_CATEGORY_PATTERN = re.compile(r"^([A-Z]+)")
_NUMBER_PATTERN = re.compile(r"(\d+)")


def _local_name(element: ET.Element) -> str:
    return element.tag.rsplit("}", 1)[-1]


def _children(element: ET.Element | None, name: str) -> list[ET.Element]:
    if element is None:
        return []
    return [child for child in element if _local_name(child) == name]


def _child(element: ET.Element | None, name: str) -> ET.Element | None:
    matches = _children(element, name)
    return matches[0] if matches else None


def _path(element: ET.Element | None, *names: str) -> ET.Element | None:
    for name in names:
        element = _child(element, name)
    return element


def _text(element: ET.Element | None, *names: str) -> str | None:
    """Stripped text at a path below ``element``, None when absent or blank."""
    target = _path(element, *names)
    if target is None or target.text is None:
        return None
    return target.text.strip() or None


def _parse_call(call: ET.Element) -> Stop:
    """Convert a CallAtStop into a pass list stop; realtime values win."""
    timetabled_arrival = _text(call, "ServiceArrival", "TimetabledTime")
    estimated_arrival = _text(call, "ServiceArrival", "EstimatedTime")
    timetabled_departure = _text(call, "ServiceDeparture", "TimetabledTime")
    estimated_departure = _text(call, "ServiceDeparture", "EstimatedTime")

    name = _text(call, "StopPointName", "Text")
    delay = calculate_delay(timetabled_departure, estimated_departure) or calculate_delay(
        timetabled_arrival, estimated_arrival
    )

    return Stop(
        station=Station(
            id=_text(call, "StopPointRef"), name=name, coordinate=stop_coordinate(name)
        ),
        arrival=estimated_arrival or timetabled_arrival,
        departure=estimated_departure or timetabled_departure,
        delay=delay,
        platform=_text(call, "PlannedQuay", "Text"),
        prognosis=Prognosis(
            platform=_text(call, "EstimatedQuay", "Text"),
            arrival=estimated_arrival,
            departure=estimated_departure,
        ),
    )


def _parse_board_stop(call: ET.Element) -> Stop:
    """Convert the queried stop's CallAtStop into the board entry's departure stop."""
    timetabled = _text(call, "ServiceDeparture", "TimetabledTime") or _text(
        call, "ServiceArrival", "TimetabledTime"
    )
    if timetabled is None:
        raise UpstreamProtocolError("ThisCall has neither a timetabled departure nor arrival")
    estimated = _text(call, "ServiceDeparture", "EstimatedTime")
    name = _text(call, "StopPointName", "Text")

    return Stop(
        station=Station(
            id=_text(call, "StopPointRef") or "",
            name=name or "",
            coordinate=stop_coordinate(name),
        ),
        departure=estimated or timetabled,
        delay=calculate_delay(timetabled, estimated),
        platform=_text(call, "PlannedQuay", "Text"),
        prognosis=Prognosis(platform=_text(call, "EstimatedQuay", "Text"), departure=estimated),
    )


def resolve_line_identity(
    published_name: str,
    category_map: CategoryMap | None,
    minute_keys: tuple[int, ...] = (),
) -> LineIdentity:
    """Pick category and number for a service.

    The lookup table wins when one of ``minute_keys`` is present in it. Otherwise a
    leading run of capitals in the published name is the category and the first digit
    run the number; without either the service is a generic train.
    """
    for key in minute_keys:
        identity = (category_map or {}).get(key)
        if identity is not None:
            return identity

    category_match = _CATEGORY_PATTERN.match(published_name)
    if category_match is None:
        return LineIdentity(DEFAULT_CATEGORY, "")
    number_match = _NUMBER_PATTERN.search(published_name)
    return LineIdentity(category_match.group(1), number_match.group(1) if number_match else "")


def _calls_at_stop(stop_event: ET.Element, wrapper: str) -> list[ET.Element]:
    calls = (_child(entry, "CallAtStop") for entry in _children(stop_event, wrapper))
    return [call for call in calls if call is not None]


def _parse_stop_event(result: ET.Element, category_map: CategoryMap | None) -> Journey:
    stop_event = _child(result, "StopEvent")
    this_call = _path(stop_event, "ThisCall", "CallAtStop")
    if stop_event is None or this_call is None:
        raise UpstreamProtocolError("StopEventResult without StopEvent/ThisCall/CallAtStop")

    board_stop = _parse_board_stop(this_call)
    calls = [*_calls_at_stop(stop_event, "PreviousCall"), this_call]
    calls.extend(_calls_at_stop(stop_event, "OnwardCall"))
    pass_list = [_parse_call(call) for call in calls]

    service = _child(stop_event, "Service")
    published_name = (
        _text(service, "PublishedServiceName", "Text")
        or _text(service, "PublishedLineName", "Text")
        or ""
    )
    timetabled = _text(this_call, "ServiceDeparture", "TimetabledTime") or _text(
        this_call, "ServiceArrival", "TimetabledTime"
    )
    keys = tuple(minute_key(value) for value in (timetabled, board_stop.departure) if value)
    identity = resolve_line_identity(published_name, category_map, keys)

    return Journey(
        stop=board_stop,
        name=_text(service, "JourneyRef") or "",
        category=identity.category,
        number=identity.number,
        operator=_text(service, "OperatorRef") or DEFAULT_OPERATOR,
        to=_text(service, "DestinationText", "Text") or "",
        pass_list=pass_list,
    )


def parse_stop_event_response(
    xml_text: str,
    station_name: str,
    category_map: CategoryMap | None = None,
) -> StationboardResponse:
    """Parse an OJP stop event delivery.

    Args:
        xml_text: Raw response body.
        station_name: Station the board was requested for.
        category_map: Optional departure-minute lookup of line identities.

    Returns:
        StationboardResponse with journeys in delivery order.

    Raises:
        UpstreamProtocolError: If the XML is malformed or lacks the delivery envelope.
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise UpstreamProtocolError(f"Malformed OJP response: {e}") from e

    delivery = _path(root, *_ENVELOPE_PATH) if _local_name(root) == "OJP" else None
    if delivery is None:
        raise UpstreamProtocolError("Invalid OJP response structure")

    journeys = [
        _parse_stop_event(result, category_map)
        for result in _children(delivery, "StopEventResult")
    ]
    logger.debug(f"Parsed {len(journeys)} stop event(s) for {station_name}")
    return StationboardResponse(station=board_station(station_name), stationboard=journeys)

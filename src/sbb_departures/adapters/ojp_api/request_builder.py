"""Build OJP 2.0 stop event request documents."""

import xml.etree.ElementTree as ET
from datetime import UTC, datetime

from sbb_departures.adapters.ojp_api.constants import (
    OJP_NAMESPACE,
    OJP_REQUESTOR_REF,
    OJP_VERSION,
    SIRI_NAMESPACE,
)

ET.register_namespace("", OJP_NAMESPACE)
ET.register_namespace("siri", SIRI_NAMESPACE)

_XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def _ojp(tag: str) -> str:
    return f"{{{OJP_NAMESPACE}}}{tag}"


def _siri(tag: str) -> str:
    return f"{{{SIRI_NAMESPACE}}}{tag}"


def _add(parent: ET.Element, tag: str, text: str | None = None) -> ET.Element:
    element = ET.SubElement(parent, tag)
    if text is not None:
        element.text = text
    return element


def format_request_timestamp(moment: datetime) -> str:
    """Format a moment as UTC ISO 8601 with milliseconds, e.g. ``2025-01-06T08:15:00.000Z``."""
    utc = moment.astimezone(UTC)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def build_stop_event_request(
    didok_id: str,
    limit: int = 15,
    requestor_ref: str = OJP_REQUESTOR_REF,
    now: datetime | None = None,
) -> str:
    """Build the XML body of a departure stop event request.

    Args:
        didok_id: DiDok number of the stop place, e.g. "8502195".
        limit: Number of stop events requested.
        requestor_ref: RequestorRef identifying this client.
        now: Request timestamp; defaults to the current time.

    Returns:
        Serialized XML document including the declaration.
    """
    timestamp = format_request_timestamp(now or datetime.now(UTC))

    root = ET.Element(_ojp("OJP"), {"version": OJP_VERSION})
    service_request = _add(_add(root, _ojp("OJPRequest")), _siri("ServiceRequest"))
    _add(service_request, _siri("RequestTimestamp"), timestamp)
    _add(service_request, _siri("RequestorRef"), requestor_ref)

    stop_event_request = _add(service_request, _ojp("OJPStopEventRequest"))
    _add(stop_event_request, _siri("RequestTimestamp"), timestamp)
    place_ref = _add(_add(stop_event_request, _ojp("Location")), _ojp("PlaceRef"))
    _add(place_ref, _ojp("StopPlaceRef"), didok_id)

    params = _add(stop_event_request, _ojp("Params"))
    _add(params, _ojp("NumberOfResults"), str(limit))
    _add(params, _ojp("StopEventType"), "departure")
    _add(params, _ojp("IncludePreviousCalls"), "true")
    _add(params, _ojp("IncludeOnwardCalls"), "true")
    _add(params, _ojp("IncludeRealtimeData"), "true")

    ET.indent(root)
    return _XML_DECLARATION + ET.tostring(root, encoding="unicode")

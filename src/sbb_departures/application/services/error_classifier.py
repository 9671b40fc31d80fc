"""Classify refresh failures for logging and state."""

import re

from sbb_departures.domain.errors import (
    ConfigurationError,
    UpstreamProtocolError,
    UpstreamTransportError,
)
from sbb_departures.domain.models.error_details import ErrorDetails

_STATUS_REASONS = {
    429: "Rate limit exceeded",
    502: "Bad gateway (server error)",
    503: "Service unavailable",
    504: "Gateway timeout",
}


def extract_error_details(error: Exception) -> ErrorDetails:
    """Extract HTTP status code and error reason from exception."""
    if isinstance(error, ConfigurationError):
        return ErrorDetails(reason="Configuration error", retryable=False)
    if isinstance(error, UpstreamProtocolError):
        return ErrorDetails(reason="Invalid upstream response")

    status_code: int | None = None
    if isinstance(error, UpstreamTransportError):
        status_code = error.status_code
    else:
        # Format: "... returned status (502) ..."
        status_match = re.search(r"\((\d{3})\)", str(error))
        status_code = int(status_match.group(1)) if status_match else None

    if status_code in _STATUS_REASONS:
        reason = _STATUS_REASONS[status_code]
    elif status_code is not None:
        reason = f"HTTP {status_code}"
    elif isinstance(error, UpstreamTransportError):
        reason = "Upstream unreachable"
    else:
        reason = "Unknown error"

    return ErrorDetails(status_code=status_code, reason=reason)

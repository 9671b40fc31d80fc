"""Opt-in logging of outgoing upstream requests (SBB_LOG_REQUESTS=true)."""

import json
import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

_SENSITIVE_HEADERS = {"authorization", "cookie", "x-api-key"}
_MAX_BODY_CHARS = 2000


def should_log_requests() -> bool:
    """Check if request logging is enabled via the SBB_LOG_REQUESTS environment variable."""
    return os.getenv("SBB_LOG_REQUESTS", "").lower() == "true"


def _format_params(params: Any) -> str:
    """Render query parameters given as a mapping or a list of pairs."""
    pairs = params.items() if isinstance(params, dict) else params
    return "&".join(f"{key}={value}" for key, value in pairs)


def _redact(headers: dict[str, str]) -> dict[str, str]:
    return {
        key: "***REDACTED***" if key.lower() in _SENSITIVE_HEADERS else value
        for key, value in headers.items()
    }


def log_api_request(
    method: str,
    url: str,
    params: Any = None,
    headers: dict[str, str] | None = None,
    body: str | None = None,
) -> None:
    """Log an outgoing request if SBB_LOG_REQUESTS is enabled.

    Args:
        method: HTTP method (GET, POST).
        url: Request URL without query string.
        params: Query parameters as a mapping or a list of (key, value) pairs.
        headers: Request headers; credentials are redacted.
        body: Request body, truncated for logging.
    """
    if not should_log_requests():
        return

    line = f"{method} {url}"
    if params:
        line = f"{line}?{_format_params(params)}"
    parts = [line]
    if headers:
        parts.append(f"Headers: {json.dumps(_redact(headers), indent=2)}")
    if body:
        parts.append(f"Body: {body[:_MAX_BODY_CHARS]}")

    logger.info("API Request:\n" + "\n".join(parts))

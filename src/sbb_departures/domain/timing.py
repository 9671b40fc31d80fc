"""Timestamp helpers shared by both upstream normalizers.

All arithmetic happens on absolute epoch milliseconds so that DST transitions
never shift a delay or a transfer window.
"""

import math
import re
from datetime import UTC, datetime, timedelta

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_COMPACT_OFFSET = re.compile(r"([+-]\d{2})(\d{2})$")

MS_PER_MINUTE = 60_000


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO 8601 timestamp as sent by either upstream.

    Accepts a trailing ``Z`` and compact offsets such as ``+0100``. Naive
    timestamps are taken as UTC.
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    else:
        text = _COMPACT_OFFSET.sub(r"\1:\2", text)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def to_epoch_ms(value: str | datetime) -> int:
    """Convert an ISO string or datetime to epoch milliseconds; naive values are UTC."""
    moment = parse_iso_datetime(value) if isinstance(value, str) else value
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return (moment - _EPOCH) // timedelta(milliseconds=1)


def optional_epoch_ms(value: str | None) -> int | None:
    """Epoch milliseconds for a possibly missing timestamp."""
    if not value:
        return None
    return to_epoch_ms(value)


def minute_key(value: str) -> int:
    """Floor a timestamp to whole minutes since the epoch (lookup key)."""
    return to_epoch_ms(value) // MS_PER_MINUTE


def calculate_delay(planned: str | None, estimated: str | None) -> int:
    """Delay in whole minutes, half a minute rounding up.

    Returns 0 when either time is missing.
    """
    if not planned or not estimated:
        return 0
    delay_ms = to_epoch_ms(estimated) - to_epoch_ms(planned)
    return math.floor(delay_ms / MS_PER_MINUTE + 0.5)

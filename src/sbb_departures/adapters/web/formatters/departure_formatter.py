"""Formatter for departure times and transfer urgency."""

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from zoneinfo import ZoneInfo

from sbb_departures.adapters.config.app_config import AppConfig
from sbb_departures.domain.models.journey_with_connection import JourneyWithConnection
from sbb_departures.domain.timing import MS_PER_MINUTE, parse_iso_datetime, to_epoch_ms


@dataclass(frozen=True)
class TimeStatus:
    """Urgency band for the time left until a departure."""

    color: str
    text: str
    text_color: str


_STATUS_BANDS: list[tuple[int, TimeStatus]] = [
    (3, TimeStatus("#DC0018", "🚨 Das reicht nicht mehr 🚨", "white")),
    (6, TimeStatus("#FF8C00", "🏃‍♂️ Run, Baby, Run 💨", "white")),
    (8, TimeStatus("#F7BA00", "⚡ Jetzt musst du dich aber sputen ⚡", "black")),
]
_RELAXED = TimeStatus("#2E327B", "😌 Das reicht noch locker ✅", "white")


class DepartureFormatter:
    """Formats departure times in the configured timezone."""

    def __init__(self, config: AppConfig) -> None:
        """Initialize the formatter.

        Args:
            config: Application configuration with the display timezone.
        """
        self.config = config

    def format_time(self, value: str) -> str:
        """Format an ISO timestamp as HH:MM in the configured timezone."""
        server_timezone = ZoneInfo(self.config.timezone)
        return parse_iso_datetime(value).astimezone(server_timezone).strftime("%H:%M")

    @staticmethod
    def format_delay(delay: int) -> str:
        if delay == 0:
            return "Pünktlich"
        return f"+{delay} Min"

    @staticmethod
    def minutes_until(value: str, now: datetime | None = None) -> int:
        """Whole minutes until ``value``, rounded down (negative once departed)."""
        now = now or datetime.now(UTC)
        return math.floor((to_epoch_ms(value) - to_epoch_ms(now)) / MS_PER_MINUTE)

    @staticmethod
    def format_time_until(minutes: int) -> str:
        """Format minutes as ``N Min`` below an hour, ``H:MM h`` otherwise."""
        if minutes < 60:
            return f"{minutes} Min"
        hours, mins = divmod(minutes, 60)
        return f"{hours}:{mins:02d} h"

    @staticmethod
    def time_status(minutes: int) -> TimeStatus:
        for upper_bound, status in _STATUS_BANDS:
            if minutes < upper_bound:
                return status
        return _RELAXED

    def describe(
        self, journey: JourneyWithConnection, now: datetime | None = None
    ) -> dict[str, Any]:
        """Display fields for a board entry; empty when the departure time is unknown."""
        departure = journey.stop.departure
        if not departure:
            return {}
        minutes = self.minutes_until(departure, now)
        status = self.time_status(minutes)
        return {
            "departureTime": self.format_time(departure),
            "delayText": self.format_delay(journey.stop.delay),
            "minutesUntil": minutes,
            "timeUntil": self.format_time_until(minutes),
            "timeStatus": {
                "color": status.color,
                "text": status.text,
                "textColor": status.text_color,
            },
        }

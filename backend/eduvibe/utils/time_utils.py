from __future__ import annotations

from datetime import datetime, time
from typing import Tuple

from ..core.constants import MINUTES_PER_DAY, SESSION_SLOTS
from ..core.exceptions import ValidationException


def time_to_minutes(t: time) -> int:
    """
    Convert time to minutes since midnight.

    Seconds and microseconds are ignored; session times are minute-granular.
    """
    return t.hour * 60 + t.minute


def minutes_to_time(minutes: int) -> time:
    """
    Convert minutes since midnight to a wall-clock time.

    Values outside one day wrap modulo 1440, so 1500 becomes 01:00.
    """
    wrapped = minutes % MINUTES_PER_DAY
    return time(wrapped // 60, wrapped % 60)


def add_minutes(t: time, minutes: int) -> time:
    """Add minutes to a wall-clock time with clock (mod 24h) arithmetic."""
    return minutes_to_time(time_to_minutes(t) + minutes)


def time_to_string(t: time) -> str:
    """Always return HH:MM format"""
    return t.strftime("%H:%M")


def string_to_time(time_str: str) -> time:
    """Parse 'HH:MM' or 'HH:MM:SS' into a time."""
    normalized = time_str.strip()
    if len(normalized) == 5:
        normalized += ":00"
    return datetime.strptime(normalized, "%H:%M:%S").time()


def parse_slot_label(label: str) -> Tuple[time, time]:
    """
    Split a slot menu label such as ``"09:00 - 11:00"`` into start and end.

    Raises:
        ValidationException: If the label is malformed or not on the slot menu
    """
    normalized = " - ".join(part.strip() for part in label.split("-"))
    if normalized not in SESSION_SLOTS:
        raise ValidationException(
            f"Unknown session slot: {label!r}",
            code="INVALID_SLOT",
            details={"label": label, "allowed": list(SESSION_SLOTS)},
        )
    start_str, end_str = normalized.split(" - ")
    return string_to_time(start_str), string_to_time(end_str)

"""
DateTime utilities for provider scheduling.

This module provides timezone-aware datetime handling, ``HH:MM`` time-string
helpers and the day-of-week convention used by weekly schedules
(0 = Sunday through 6 = Saturday).
"""

import re
from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

UTC = ZoneInfo("UTC")

# 24-hour HH:MM, leading zero on the hour optional
TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")


def get_current_utc() -> datetime:
    """Get the current UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Return a timezone-aware UTC datetime.

    SQLite hands back naive datetimes; those are assumed to already be UTC.

    Args:
        dt: Datetime to normalise, or None

    Returns:
        The datetime expressed in UTC, or None
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def is_valid_time_string(value: object) -> bool:
    """Check that a value is an ``HH:MM`` 24-hour time string."""
    return isinstance(value, str) and TIME_PATTERN.match(value) is not None


def time_to_minutes(time_str: str) -> int:
    """
    Convert an ``HH:MM`` string to minutes past midnight.

    Raises:
        ValueError: If the string is not a valid time
    """
    if not is_valid_time_string(time_str):
        raise ValueError(f"Invalid time string: {time_str!r}")
    hours, minutes = time_str.split(":")
    return int(hours) * 60 + int(minutes)


def schedule_day_index(value: date) -> int:
    """
    Map a date to the weekly-schedule day number (0 = Sunday).

    Python's ``weekday()`` counts from Monday = 0, so shift by one.
    """
    return (value.weekday() + 1) % 7


def parse_iso_datetime(value: str, to_utc: bool = True) -> datetime:
    """
    Parse an ISO-8601 date or datetime string.

    Accepts a trailing ``Z`` and bare dates. With ``to_utc`` the result is an
    aware UTC datetime (naive input is taken as UTC); otherwise the parsed
    value is returned as written, keeping its wall-clock time.

    Raises:
        ValueError: If the value is not ISO-8601
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Date must be a non-empty ISO-8601 string")

    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"

    parsed = datetime.fromisoformat(text)
    return ensure_utc(parsed) if to_utc else parsed


def minutes_since(moment: Optional[datetime], now: Optional[datetime] = None) -> float:
    """
    Minutes elapsed between ``moment`` and ``now`` (defaults to current UTC).

    Returns 0 when ``moment`` is unknown.
    """
    if moment is None:
        return 0.0
    now = now or get_current_utc()
    delta: timedelta = ensure_utc(now) - ensure_utc(moment)
    return delta.total_seconds() / 60

"""
Availability model for the vetmarket package.

This module contains the Availability SQLAlchemy model holding a provider's
recurring weekly schedule and date-specific overrides, plus the lookup that
answers whether the provider works at a given moment.
"""

import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from ..database.types import JSONType
from ..utils.datetime_utils import schedule_day_index, time_to_minutes
from .base import BaseModel

MINUTES_PER_DAY = 24 * 60


class Availability(BaseModel):
    """
    Weekly schedule and special-date overrides for one provider profile.

    ``weekly_schedule`` entries are dictionaries with ``day_of_week``
    (0 = Sunday .. 6 = Saturday), ``start_time``/``end_time`` as ``HH:MM``
    and ``is_available``. ``special_dates`` entries carry an ISO ``date``,
    ``is_available``, optional ``start_time``/``end_time`` and a ``note``.
    """

    __tablename__ = "availabilities"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize Availability with empty schedules."""
        kwargs.setdefault("weekly_schedule", [])
        kwargs.setdefault("special_dates", [])

        super().__init__(**kwargs)

    profile_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("visiting_vet_profiles.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
        comment="Profile this schedule belongs to",
    )

    weekly_schedule: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
        comment="Recurring hours per day of week",
    )

    special_dates: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
        comment="Date-specific overrides of the weekly schedule",
    )

    def __repr__(self) -> str:
        return f"<Availability(id={self.id}, profile_id={self.profile_id})>"

    def special_date_for(self, day: date) -> Optional[Dict[str, Any]]:
        """Return the override for a calendar day, if one exists."""
        key = day.isoformat()
        for entry in self.special_dates or []:
            if str(entry.get("date", ""))[:10] == key:
                return entry
        return None

    def day_schedule_for(self, day: date) -> Optional[Dict[str, Any]]:
        """Return the weekly entry for the weekday of ``day``, if one exists."""
        index = schedule_day_index(day)
        for entry in self.weekly_schedule or []:
            if entry.get("day_of_week") == index:
                return entry
        return None

    def hours_for(self, day: date) -> Optional[Tuple[int, int]]:
        """
        Working window for a calendar day as minutes past midnight.

        A special date on that day takes precedence over the weekly schedule;
        an available special date without hours covers the whole day.

        Returns:
            ``(start, end)`` minutes, or None when the provider is off
        """
        special = self.special_date_for(day)
        if special is not None:
            if not special.get("is_available", False):
                return None
            start, end = special.get("start_time"), special.get("end_time")
            if start and end:
                return time_to_minutes(start), time_to_minutes(end)
            return 0, MINUTES_PER_DAY

        entry = self.day_schedule_for(day)
        if entry is None or not entry.get("is_available", True):
            return None
        return time_to_minutes(entry["start_time"]), time_to_minutes(entry["end_time"])

    def is_time_available(self, moment: datetime) -> bool:
        """
        Check whether the provider is available at ``moment``.

        Bounds are inclusive at minute resolution.

        Args:
            moment: Point in time to check (interpreted in its own timezone)

        Returns:
            True if the provider is working at that time
        """
        window = self.hours_for(moment.date())
        if window is None:
            return False
        minutes = moment.hour * 60 + moment.minute
        return window[0] <= minutes <= window[1]

    def can_fit(self, start: datetime, duration_minutes: int) -> bool:
        """
        Check that a visit starting at ``start`` ends inside the same window.

        The visit must start at or after the window opens and finish no later
        than it closes, on the day it starts.
        """
        window = self.hours_for(start.date())
        if window is None:
            return False
        begin = start.hour * 60 + start.minute
        return window[0] <= begin and begin + duration_minutes <= window[1]

"""
Availability Pydantic schemas.

The update body keeps ``weeklySchedule`` and ``specialDates`` as raw JSON so
the availability service can reject a malformed batch with a single,
specific message; the entry schemas below are what a well-formed batch is
parsed into.
"""

import datetime as dt
from typing import Any, List, Optional
from uuid import UUID

from pydantic import Field, StrictInt, field_validator

from ..utils.datetime_utils import is_valid_time_string
from .common import CamelModel, ResponseModel


def check_time_format(v: Optional[str]) -> Optional[str]:
    """Reject times that are not 24-hour ``HH:MM``."""
    if v is not None and not is_valid_time_string(v):
        raise ValueError("Time must be in HH:MM format (24-hour)")
    return v


class WeeklyScheduleEntry(CamelModel):
    """One day of the recurring weekly schedule."""

    day_of_week: StrictInt = Field(..., ge=0, le=6, description="0 = Sunday")
    start_time: str = Field(..., description="Start time in HH:MM format")
    end_time: str = Field(..., description="End time in HH:MM format")
    is_available: bool = True

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_times(cls, v: str) -> str:
        return check_time_format(v)


class SpecialDateEntry(CamelModel):
    """A date-specific override of the weekly schedule."""

    date: dt.date
    is_available: bool = False
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    note: Optional[str] = Field(None, max_length=200)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_times(cls, v: Optional[str]) -> Optional[str]:
        return check_time_format(v)


class AvailabilityUpdate(CamelModel):
    """Raw body of the availability update endpoint."""

    weekly_schedule: Optional[Any] = None
    special_dates: Optional[Any] = None


class AvailabilityResponse(ResponseModel):
    """Full availability as seen by the owning provider."""

    id: UUID
    profile_id: UUID
    weekly_schedule: List[WeeklyScheduleEntry] = []
    special_dates: List[SpecialDateEntry] = []
    created_at: dt.datetime
    updated_at: dt.datetime


class PublicAvailabilityResponse(ResponseModel):
    """Availability as shown to the public (weekly schedule only)."""

    weekly_schedule: List[WeeklyScheduleEntry] = []


class AvailabilityCheckResponse(CamelModel):
    """Answer to a point-in-time availability query."""

    profile_id: UUID
    at: dt.datetime
    available: bool

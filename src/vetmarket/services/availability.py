"""
Provider availability operations.

Schedules are validated as a whole before anything is looked up or written:
the first malformed entry rejects the entire batch.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import NotFoundException, ValidationException, format_validation_errors
from ..models.availability import Availability
from ..models.profile import VisitingVetProfile
from ..models.user import User
from ..schemas.availability import AvailabilityUpdate, SpecialDateEntry, WeeklyScheduleEntry
from ..utils.datetime_utils import parse_iso_datetime

logger = logging.getLogger(__name__)

PROFILE_REQUIRED = "Provider profile not found. Please create a profile first."
NO_AVAILABILITY = "No availability found for this provider."
NO_SCHEDULE_YET = "No availability schedule has been set up yet."


def validate_weekly_schedule(raw: Any) -> List[Dict[str, Any]]:
    """
    Validate a weekly schedule batch and return it in storage form.

    Raises:
        ValidationException: If the value is not a list, or on the first entry
            with a bad day index or time string
    """
    if not isinstance(raw, list):
        raise ValidationException("Weekly schedule must be an array", field="weeklySchedule")

    entries = []
    for index, item in enumerate(raw):
        try:
            entry = WeeklyScheduleEntry.model_validate(item)
        except ValidationError as e:
            raise ValidationException(
                "Invalid day schedule format",
                field=f"weeklySchedule[{index}]",
                validation_errors=format_validation_errors(e.errors()),
            )
        entries.append(entry.model_dump(mode="json"))
    return entries


def validate_special_dates(raw: Any) -> List[Dict[str, Any]]:
    """
    Validate a special-date batch and return it in storage form.

    Raises:
        ValidationException: If the value is not a list, or on the first
            malformed entry
    """
    if not isinstance(raw, list):
        raise ValidationException("Special dates must be an array", field="specialDates")

    entries = []
    for index, item in enumerate(raw):
        try:
            entry = SpecialDateEntry.model_validate(item)
        except ValidationError as e:
            raise ValidationException(
                "Invalid special date format",
                field=f"specialDates[{index}]",
                validation_errors=format_validation_errors(e.errors()),
            )
        entries.append(entry.model_dump(mode="json"))
    return entries


class AvailabilityService:
    """Business logic for provider schedules."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_by_profile(self, profile_id: uuid.UUID) -> Optional[Availability]:
        result = await self.session.execute(
            select(Availability).where(Availability.profile_id == profile_id)
        )
        return result.scalar_one_or_none()

    async def _require_provider_profile(self, user: User) -> VisitingVetProfile:
        result = await self.session.execute(
            select(VisitingVetProfile).where(VisitingVetProfile.user_id == user.id)
        )
        profile = result.scalar_one_or_none()
        if profile is None:
            raise NotFoundException(PROFILE_REQUIRED, resource="VisitingVetProfile")
        return profile

    async def get_my_availability(self, user: User) -> Optional[Availability]:
        """
        The caller's availability, or None when no schedule exists yet.

        Raises:
            NotFoundException: If the caller has no profile
        """
        profile = await self._require_provider_profile(user)
        return await self._get_by_profile(profile.id)

    async def update_my_availability(
        self, user: User, payload: AvailabilityUpdate
    ) -> Availability:
        """
        Create or replace the caller's schedule.

        Only the lists present in the payload are replaced.

        Raises:
            ValidationException: On a malformed schedule (nothing is written)
            NotFoundException: If the caller has no profile
        """
        fields = payload.model_dump(exclude_unset=True)

        updates: Dict[str, Any] = {}
        if fields.get("weekly_schedule") is not None:
            updates["weekly_schedule"] = validate_weekly_schedule(fields["weekly_schedule"])
        if fields.get("special_dates") is not None:
            updates["special_dates"] = validate_special_dates(fields["special_dates"])

        profile = await self._require_provider_profile(user)
        availability = await self._get_by_profile(profile.id)
        if availability is None:
            availability = Availability(profile_id=profile.id, **updates)
            self.session.add(availability)
        else:
            availability.update_fields(**updates)

        await self.session.commit()
        logger.info(f"Availability updated for profile {profile.id}")
        return availability

    async def get_public_availability(self, profile_id: uuid.UUID) -> Availability:
        """
        A provider's availability for public viewing.

        Raises:
            NotFoundException: If the provider has no availability
        """
        availability = await self._get_by_profile(profile_id)
        if availability is None:
            raise NotFoundException(
                NO_AVAILABILITY, resource="Availability", resource_id=profile_id
            )
        return availability

    async def is_available_at(self, profile_id: uuid.UUID, at: str) -> bool:
        """
        Check whether a provider works at an ISO-8601 moment.

        Raises:
            ValidationException: If ``at`` is not a valid ISO-8601 value
            NotFoundException: If the provider has no availability
        """
        try:
            moment: datetime = parse_iso_datetime(at, to_utc=False)
        except ValueError:
            raise ValidationException(
                "Invalid date format. Use ISO-8601.", field="at", value=at
            )
        availability = await self.get_public_availability(profile_id)
        return availability.is_time_available(moment)

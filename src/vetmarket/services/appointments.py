"""
Appointment booking and lifecycle.

A request must name one of the provider's services and fit, start to
estimated end, inside the provider's working hours for that day. Requested
and confirmed visits block their time slot for later requests.
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Dict, FrozenSet, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import (
    AuthorizationException,
    BusinessRuleException,
    NotFoundException,
    ValidationException,
)
from ..models.appointment import Appointment, AppointmentStatus
from ..models.availability import Availability
from ..models.profile import VisitingVetProfile
from ..models.service import Service
from ..models.user import User
from ..schemas.appointment import AppointmentCreate
from ..utils.datetime_utils import ensure_utc
from .availability import PROFILE_REQUIRED

logger = logging.getLogger(__name__)

APPOINTMENT_NOT_FOUND = "Appointment not found"

# Statuses that hold a slot on the provider's calendar
BLOCKING_STATUSES = (AppointmentStatus.REQUESTED, AppointmentStatus.CONFIRMED)

ALLOWED_TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    AppointmentStatus.REQUESTED: frozenset(
        {AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED}
    ),
    AppointmentStatus.CONFIRMED: frozenset(
        {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}
    ),
}


def overlaps(
    start: datetime, end: datetime, other_start: datetime, other_end: datetime
) -> bool:
    """Half-open interval overlap; touching end to start is not a clash."""
    return other_start < end and other_end > start


class AppointmentService:
    """Business logic for appointments."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _require_provider_profile(self, user: User) -> VisitingVetProfile:
        profile = await self.session.scalar(
            select(VisitingVetProfile).where(VisitingVetProfile.user_id == user.id)
        )
        if profile is None:
            raise NotFoundException(PROFILE_REQUIRED, resource="VisitingVetProfile")
        return profile

    async def _has_conflict(
        self, profile_id: uuid.UUID, start: datetime, end: datetime
    ) -> bool:
        result = await self.session.execute(
            select(Appointment).where(
                Appointment.provider_profile_id == profile_id,
                Appointment.status.in_(BLOCKING_STATUSES),
            )
        )
        for existing in result.scalars():
            existing_start = ensure_utc(existing.appointment_time)
            existing_end = ensure_utc(existing.estimated_end_time) or existing_start
            if overlaps(start, end, existing_start, existing_end):
                logger.debug(f"Requested slot clashes with appointment {existing.id}")
                return True
        return False

    async def request_appointment(self, user: User, payload: AppointmentCreate) -> Appointment:
        """
        Book a visit with a provider.

        The time is checked against the provider's hours in the wall-clock
        time it was sent in, and stored in UTC.

        Raises:
            ValidationException: Missing profile, service or time
            NotFoundException: Unknown profile, a service the provider does not
                offer, or a provider without a schedule
            BusinessRuleException: Outside working hours, or overlapping a
                requested or confirmed appointment
        """
        if (
            payload.provider_profile_id is None
            or payload.service_id is None
            or payload.appointment_time is None
        ):
            raise ValidationException(
                "Provider profile ID, service ID, and appointment time are required"
            )
        profile_id = payload.provider_profile_id

        if await self.session.get(VisitingVetProfile, profile_id) is None:
            raise NotFoundException(
                "Provider profile not found", resource="VisitingVetProfile", resource_id=profile_id
            )

        service = await self.session.get(Service, payload.service_id)
        if service is None or not service.belongs_to(profile_id):
            raise NotFoundException(
                "Service not found or does not belong to this provider",
                resource="Service",
                resource_id=payload.service_id,
            )

        availability = await self.session.scalar(
            select(Availability).where(Availability.profile_id == profile_id)
        )
        if availability is None:
            raise NotFoundException(
                "Provider has not set their availability",
                resource="Availability",
                resource_id=profile_id,
            )

        duration = service.estimated_duration_minutes
        if not availability.can_fit(payload.appointment_time, duration):
            raise BusinessRuleException(
                "The requested time is outside the provider's availability",
                rule_name="within_availability",
            )

        start = ensure_utc(payload.appointment_time)
        end = start + timedelta(minutes=duration)
        if await self._has_conflict(profile_id, start, end):
            raise BusinessRuleException(
                "The requested time conflicts with another appointment",
                rule_name="no_double_booking",
            )

        appointment = Appointment(
            pet_owner_id=user.id,
            provider_profile_id=profile_id,
            service_id=service.id,
            appointment_time=start,
            estimated_end_time=end,
            notes=payload.notes or "",
            status=AppointmentStatus.REQUESTED,
        )
        self.session.add(appointment)
        await self.session.commit()

        logger.info(
            f"Appointment {appointment.id} requested by {user.id} with profile {profile_id}"
        )
        return appointment

    async def list_for_pet_owner(self, user: User) -> List[Appointment]:
        """The caller's appointments, soonest first."""
        result = await self.session.execute(
            select(Appointment)
            .where(Appointment.pet_owner_id == user.id)
            .order_by(Appointment.appointment_time.asc())
        )
        return list(result.scalars().all())

    async def list_for_provider(
        self, user: User, status: Optional[str] = None
    ) -> List[Appointment]:
        """
        Appointments booked with the caller's profile, soonest first.

        Raises:
            ValidationException: If ``status`` is not an appointment status
            NotFoundException: If the caller has no profile
        """
        status_filter = None
        if status:
            try:
                status_filter = AppointmentStatus(status)
            except ValueError:
                raise ValidationException("Invalid status", field="status", value=status)

        profile = await self._require_provider_profile(user)
        query = select(Appointment).where(Appointment.provider_profile_id == profile.id)
        if status_filter is not None:
            query = query.where(Appointment.status == status_filter)

        result = await self.session.execute(query.order_by(Appointment.appointment_time.asc()))
        return list(result.scalars().all())

    async def update_status(
        self, user: User, appointment_id: uuid.UUID, status: AppointmentStatus
    ) -> Appointment:
        """
        Move one of the caller's appointments to a new status.

        Requested visits can be confirmed or cancelled; confirmed visits can
        be completed or cancelled. Completed and cancelled visits are final.

        Raises:
            NotFoundException: Unknown appointment, or the caller has no profile
            AuthorizationException: Appointment booked with another provider
            BusinessRuleException: Transition not allowed from the current status
        """
        profile = await self._require_provider_profile(user)

        appointment = await self.session.get(Appointment, appointment_id)
        if appointment is None:
            raise NotFoundException(
                APPOINTMENT_NOT_FOUND, resource="Appointment", resource_id=appointment_id
            )
        if appointment.provider_profile_id != profile.id:
            logger.warning(
                f"User {user.id} tried to update appointment {appointment_id} of profile "
                f"{appointment.provider_profile_id}"
            )
            raise AuthorizationException("Not authorized to update this appointment")

        current = appointment.status
        if status not in ALLOWED_TRANSITIONS.get(current, frozenset()):
            raise BusinessRuleException(
                f"Cannot change appointment status from {current.value} to {status.value}",
                rule_name="status_transition",
                context={"from": current.value, "to": status.value},
            )

        appointment.status = status
        await self.session.commit()

        logger.info(f"Appointment {appointment.id} moved from {current.value} to {status.value}")
        return appointment

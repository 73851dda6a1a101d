"""Availability router - provider schedules"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...models.user import User
from ...schemas.availability import (
    AvailabilityCheckResponse,
    AvailabilityResponse,
    AvailabilityUpdate,
    PublicAvailabilityResponse,
)
from ...services.availability import NO_AVAILABILITY, NO_SCHEDULE_YET, AvailabilityService
from ..deps import get_db_session, parse_public_id, require_provider
from ..responses import envelope, serialize

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/availability", tags=["Availability"])


def get_availability_service(
    session: AsyncSession = Depends(get_db_session),
) -> AvailabilityService:
    """Dependency injection for AvailabilityService"""
    return AvailabilityService(session)


@router.get("/me")
async def get_my_availability(
    user: User = Depends(require_provider),
    service: AvailabilityService = Depends(get_availability_service),
):
    availability = await service.get_my_availability(user)
    if availability is None:
        return envelope(
            {"weeklySchedule": [], "specialDates": []},
            message=NO_SCHEDULE_YET,
        )
    return envelope(serialize(AvailabilityResponse, availability))


@router.post("/me")
async def update_my_availability(
    payload: AvailabilityUpdate,
    user: User = Depends(require_provider),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Replace the weekly schedule and/or special dates; a bad entry rejects the batch"""
    availability = await service.update_my_availability(user, payload)
    return envelope(
        serialize(AvailabilityResponse, availability),
        message="Availability updated successfully",
    )


@router.get("/{profile_id}")
async def get_provider_availability(
    profile_id: str,
    service: AvailabilityService = Depends(get_availability_service),
):
    profile_uuid = parse_public_id(profile_id, NO_AVAILABILITY, "Availability")
    availability = await service.get_public_availability(profile_uuid)
    return envelope(serialize(PublicAvailabilityResponse, availability))


@router.get("/{profile_id}/check")
async def check_provider_availability(
    profile_id: str,
    at: str = Query(..., description="ISO-8601 date-time"),
    service: AvailabilityService = Depends(get_availability_service),
):
    profile_uuid = parse_public_id(profile_id, NO_AVAILABILITY, "Availability")
    available = await service.is_available_at(profile_uuid, at)
    check = AvailabilityCheckResponse(profile_id=profile_uuid, at=at, available=available)
    return envelope(check.to_api())

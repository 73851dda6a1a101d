"""Appointments router - booking requests and provider status updates"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...models.user import User
from ...schemas.appointment import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentStatusUpdate,
)
from ...services.appointments import AppointmentService
from ..deps import get_db_session, require_pet_owner, require_provider
from ..responses import envelope, serialize, serialize_many

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/appointments", tags=["Appointments"])


def get_appointment_service(
    session: AsyncSession = Depends(get_db_session),
) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(session)


@router.post("")
async def request_appointment(
    payload: AppointmentCreate,
    user: User = Depends(require_pet_owner),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Request a visit inside the provider's working hours"""
    appointment = await service.request_appointment(user, payload)
    return envelope(serialize(AppointmentResponse, appointment), status_code=201)


@router.get("/my-appointments")
async def get_my_appointments(
    user: User = Depends(require_pet_owner),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointments = await service.list_for_pet_owner(user)
    return envelope(serialize_many(AppointmentResponse, appointments), count=len(appointments))


@router.get("/provider")
async def get_provider_appointments(
    status: Optional[str] = Query(None),
    user: User = Depends(require_provider),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointments = await service.list_for_provider(user, status)
    return envelope(serialize_many(AppointmentResponse, appointments), count=len(appointments))


@router.put("/{appointment_id}/status")
async def update_appointment_status(
    appointment_id: uuid.UUID,
    payload: AppointmentStatusUpdate,
    user: User = Depends(require_provider),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = await service.update_status(user, appointment_id, payload.status)
    return envelope(serialize(AppointmentResponse, appointment))

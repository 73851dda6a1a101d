"""
Appointment Pydantic schemas for API validation and serialization.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from ..models.appointment import AppointmentStatus
from .common import CamelModel, ResponseModel


class AppointmentCreate(CamelModel):
    """
    Schema for a pet owner requesting a visit.

    The ids and time are optional here so a missing one gets the booking
    error message rather than a generic validation failure.
    """

    provider_profile_id: Optional[UUID] = None
    service_id: Optional[UUID] = None
    appointment_time: Optional[datetime] = None
    notes: Optional[str] = Field(None, max_length=500)


class AppointmentStatusUpdate(CamelModel):
    status: AppointmentStatus = Field(..., description="Confirmed, Completed or Cancelled")


class AppointmentResponse(ResponseModel):
    """Schema for appointment data returned by the API."""

    id: UUID
    pet_owner_id: UUID
    provider_profile_id: UUID
    service_id: Optional[UUID] = None
    appointment_time: datetime
    estimated_end_time: Optional[datetime] = None
    notes: Optional[str] = None
    status: AppointmentStatus
    created_at: datetime
    updated_at: datetime

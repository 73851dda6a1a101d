"""
Appointment model for the vetmarket package.

Pet owners request visits inside a provider's working hours; the provider
then confirms, completes or cancels them. Completed visits can be reviewed.
"""

import enum
import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from ..database.types import value_enum
from .base import BaseModel


class AppointmentStatus(enum.Enum):
    """Lifecycle states of an appointment."""

    REQUESTED = "Requested"
    CONFIRMED = "Confirmed"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class Appointment(BaseModel):
    """A visit booked by a pet owner with a provider."""

    __tablename__ = "appointments"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize Appointment with default values."""
        kwargs.setdefault("status", AppointmentStatus.REQUESTED)
        super().__init__(**kwargs)

    pet_owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    provider_profile_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("visiting_vet_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    service_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("services.id", ondelete="SET NULL"), nullable=True
    )

    appointment_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    estimated_end_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, comment="Start plus the service duration"
    )

    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    status: Mapped[AppointmentStatus] = mapped_column(
        value_enum(AppointmentStatus, "appointmentstatus"),
        nullable=False,
        default=AppointmentStatus.REQUESTED,
        index=True,
    )

    __table_args__ = (
        Index("idx_appointment_provider_time", "provider_profile_id", "appointment_time"),
    )

    @property
    def is_completed(self) -> bool:
        return self.status == AppointmentStatus.COMPLETED

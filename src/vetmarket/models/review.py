"""
Review model for the vetmarket package.

This module contains the Review SQLAlchemy model. Reviews are written by pet
owners for completed appointments, enter a moderation queue, and only
approved reviews count toward a provider's rating.
"""

import enum
import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from ..database.types import value_enum
from ..utils.datetime_utils import get_current_utc
from .base import BaseModel


class ModerationStatus(enum.Enum):
    """Moderation states of a review."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class Review(BaseModel):
    """A rating and comment left by a pet owner for a provider."""

    __tablename__ = "reviews"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize Review with default values."""
        kwargs.setdefault("moderation_status", ModerationStatus.PENDING)
        super().__init__(**kwargs)

    rating: Mapped[int] = mapped_column(nullable=False, comment="Stars from 1 to 5")

    comment: Mapped[str] = mapped_column(String(1000), nullable=False)

    reviewer_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    provider_profile_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("visiting_vet_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    appointment_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("appointments.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        comment="One review per appointment",
    )

    moderation_status: Mapped[ModerationStatus] = mapped_column(
        value_enum(ModerationStatus, "moderationstatus"),
        nullable=False,
        default=ModerationStatus.PENDING,
        index=True,
    )

    moderator_notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    provider_response_comment: Mapped[Optional[str]] = mapped_column(
        String(1000), nullable=True
    )

    provider_response_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="check_rating_range"),
        Index(
            "idx_review_provider_status",
            "provider_profile_id",
            "moderation_status",
        ),
    )

    @property
    def is_approved(self) -> bool:
        return self.moderation_status == ModerationStatus.APPROVED

    def moderate(self, status: ModerationStatus, notes: Optional[str] = None) -> None:
        """Record a moderation decision."""
        self.moderation_status = status
        if notes is not None:
            self.moderator_notes = notes

    def respond(self, comment: str) -> None:
        """Attach the provider's public response."""
        self.provider_response_comment = comment
        self.provider_response_date = get_current_utc()

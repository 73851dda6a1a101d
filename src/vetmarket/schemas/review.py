"""
Review Pydantic schemas for API validation and serialization.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from ..models.review import ModerationStatus
from .common import CamelModel, ResponseModel


class ReviewCreate(CamelModel):
    """Schema for submitting a review of a completed appointment."""

    appointment_id: Optional[UUID] = None
    rating: Optional[int] = Field(None, ge=1, le=5, description="Stars from 1 to 5")
    comment: Optional[str] = Field(None, max_length=1000)


class ReviewUpdate(CamelModel):
    """Schema for the reviewer editing their own review."""

    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, min_length=1, max_length=1000)


class ReviewModeration(CamelModel):
    """Schema for an admin moderation decision."""

    status: str = Field(..., description="Approved or Rejected")
    moderator_notes: Optional[str] = Field(None, max_length=500)


class ProviderResponseCreate(CamelModel):
    """Schema for a provider answering a review."""

    comment: str = Field(..., min_length=1, max_length=1000)


class ReviewResponse(ResponseModel):
    """Schema for review data returned by the API."""

    id: UUID
    rating: int
    comment: str
    reviewer_id: UUID
    provider_profile_id: UUID
    appointment_id: UUID
    moderation_status: ModerationStatus
    moderator_notes: Optional[str] = None
    provider_response_comment: Optional[str] = None
    provider_response_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

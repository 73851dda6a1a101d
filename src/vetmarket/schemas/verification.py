"""
Verification and admin-action Pydantic schemas.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import AliasChoices, Field, field_validator

from ..models.verification import AdminActionType, VerificationRequestStatus
from .common import CamelModel, ResponseModel


class VerificationDocument(CamelModel):
    """A document attached to a verification request."""

    name: str = Field(..., min_length=1, max_length=200)
    url: str = Field(..., min_length=1, max_length=500)


class VerificationRequestCreate(CamelModel):
    """Schema for submitting documents for account verification."""

    documents: List[VerificationDocument] = []
    notes: Optional[str] = Field(None, max_length=2000)


class VerificationRequestResponse(ResponseModel):
    """Schema for verification request data returned by the API."""

    id: UUID
    user_id: UUID
    status: VerificationRequestStatus
    documents: List[Dict[str, Any]] = []
    notes: Optional[str] = None
    reviewed_by_id: Optional[UUID] = None
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: datetime


class RejectionRequest(CamelModel):
    """Schema for rejecting a verification request."""

    reason: Optional[str] = Field(None, max_length=2000)


class BulkVerificationRequest(CamelModel):
    """Schema for approving or rejecting many verification requests at once."""

    action: Literal["approve", "reject"]
    request_ids: List[UUID] = Field(..., min_length=1)
    reason: Optional[str] = Field(None, max_length=2000)

    @field_validator("action", mode="before")
    @classmethod
    def normalize_action(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v


class BulkItemResult(CamelModel):
    """Outcome of one item in a bulk action."""

    request_id: UUID
    success: bool
    message: str


class BulkVerificationResult(CamelModel):
    """Aggregate outcome of a bulk action."""

    action: str
    processed: int
    succeeded: int
    failed: int
    results: List[BulkItemResult]


class ManualVerificationRequest(CamelModel):
    """Schema for recording a manual DORA licence check."""

    status: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("status", "doraVerificationStatus"),
        description="One of the DORA status values",
    )
    date: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("date", "doraVerificationDate"),
        description="ISO-8601 time of the check",
    )


class AdminActionLogResponse(ResponseModel):
    """Schema for audit log entries returned by the API."""

    id: UUID
    admin_id: UUID
    action_type: AdminActionType
    target_user_id: Optional[UUID] = None
    details: Optional[Dict[str, Any]] = None
    reason: Optional[str] = None
    created_at: datetime

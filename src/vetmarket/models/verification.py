"""
Account verification and admin audit models for the vetmarket package.

This module contains the VerificationRequest model (documents submitted by an
account for admin review) and the AdminActionLog model recording every
administrative action taken on user accounts.
"""

import enum
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..database.types import JSONType, value_enum
from ..utils.datetime_utils import get_current_utc
from .base import BaseModel


class VerificationRequestStatus(enum.Enum):
    """States of a verification request."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class AdminActionType(enum.Enum):
    """Kinds of administrative actions recorded in the audit log."""

    VERIFY_USER = "VerifyUser"
    REJECT_VERIFICATION = "RejectVerification"
    BAN_USER = "BanUser"
    UNBAN_USER = "UnbanUser"
    ISSUE_WARNING = "IssueWarning"
    REVIEW_CONTENT = "ReviewContent"
    DELETE_CONTENT = "DeleteContent"
    MANUAL_DORA_CHECK = "ManualDoraCheck"


class VerificationRequest(BaseModel):
    """Documents submitted by an account holder to get verified."""

    __tablename__ = "verification_requests"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize VerificationRequest with default values."""
        kwargs.setdefault("status", VerificationRequestStatus.PENDING)
        kwargs.setdefault("documents", [])
        super().__init__(**kwargs)

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    status: Mapped[VerificationRequestStatus] = mapped_column(
        value_enum(VerificationRequestStatus, "verificationrequeststatus"),
        nullable=False,
        default=VerificationRequestStatus.PENDING,
        index=True,
    )

    documents: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
        comment="Submitted documents as {name, url} objects",
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    reviewed_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    reviewed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("idx_verification_status_created", "status", "created_at"),)

    @property
    def is_pending(self) -> bool:
        return self.status == VerificationRequestStatus.PENDING

    def approve(self, admin_id: uuid.UUID) -> None:
        """Mark the request approved by ``admin_id``."""
        self.status = VerificationRequestStatus.APPROVED
        self.reviewed_by_id = admin_id
        self.reviewed_at = get_current_utc()

    def reject(self, admin_id: uuid.UUID, reason: Optional[str] = None) -> None:
        """Mark the request rejected by ``admin_id``."""
        self.status = VerificationRequestStatus.REJECTED
        self.reviewed_by_id = admin_id
        self.reviewed_at = get_current_utc()
        self.rejection_reason = reason


class AdminActionLog(BaseModel):
    """Audit record of an administrative action."""

    __tablename__ = "admin_action_logs"

    admin_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    action_type: Mapped[AdminActionType] = mapped_column(
        value_enum(AdminActionType, "adminactiontype"), nullable=False, index=True
    )

    target_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    details: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSONType, nullable=True)

    reason: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    __table_args__ = (Index("idx_admin_action_created", "created_at"),)

"""
User model for the vetmarket package.

This module contains the User SQLAlchemy model with role-based access,
account verification state, moderation flags and session-activity tracking.
"""

import enum
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..database.types import value_enum
from ..utils.datetime_utils import get_current_utc, minutes_since
from .base import BaseModel

DEFAULT_PROFILE_IMAGE = "/assets/default-profile.png"
DEFAULT_SESSION_TIMEOUT_MINUTES = 30


class UserRole(enum.Enum):
    """Enumeration of account roles."""

    PET_OWNER = "PetOwner"
    MVS_PROVIDER = "MVSProvider"
    CLINIC = "Clinic"
    ADMIN = "Admin"

    @classmethod
    def normalize(cls, value: Any) -> "UserRole":
        """
        Resolve a role from its stored value, member name or display name.

        Raises:
            ValueError: If the value names no role
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        if text in ROLE_DISPLAY_NAMES:
            return ROLE_DISPLAY_NAMES[text]
        for member in cls:
            if text in (member.value, member.name):
                return member
        raise ValueError(f"Invalid role: {value}")


# Display names used by the sign-up form
ROLE_DISPLAY_NAMES = {
    "Pet Owner": UserRole.PET_OWNER,
    "Mobile Vet Provider": UserRole.MVS_PROVIDER,
    "Veterinary Clinic": UserRole.CLINIC,
}


class VerificationStatus(enum.Enum):
    """Enumeration of account verification states."""

    NOT_SUBMITTED = "NotSubmitted"
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class User(BaseModel):
    """
    User account for pet owners, providers, clinics and administrators.

    Credentials are stored as a bcrypt hash; the plain password never reaches
    the model. A provider account owns at most one ``VisitingVetProfile``.
    """

    __tablename__ = "users"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize User with default values."""
        kwargs.setdefault("role", UserRole.PET_OWNER)
        kwargs.setdefault("profile_image", DEFAULT_PROFILE_IMAGE)
        kwargs.setdefault("is_verified", False)
        kwargs.setdefault("verification_status", VerificationStatus.NOT_SUBMITTED)
        kwargs.setdefault("is_banned", False)
        kwargs.setdefault("session_timeout_minutes", DEFAULT_SESSION_TIMEOUT_MINUTES)
        if kwargs.get("email"):
            kwargs["email"] = kwargs["email"].strip().lower()

        super().__init__(**kwargs)

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="Login email, stored lower-cased",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash of the account password",
    )

    name: Mapped[Optional[str]] = mapped_column(
        String(200), nullable=True, comment="Display name"
    )

    role: Mapped[UserRole] = mapped_column(
        value_enum(UserRole, "userrole"),
        nullable=False,
        default=UserRole.PET_OWNER,
        index=True,
        comment="Account role used by route authorization",
    )

    phone_number: Mapped[Optional[str]] = mapped_column(
        String(30), nullable=True, comment="Contact phone number"
    )

    profile_image: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        default=DEFAULT_PROFILE_IMAGE,
        comment="URL or path of the profile picture",
    )

    # Verification
    is_verified: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, comment="Admin-verified account"
    )

    verification_status: Mapped[VerificationStatus] = mapped_column(
        value_enum(VerificationStatus, "verificationstatus"),
        nullable=False,
        default=VerificationStatus.NOT_SUBMITTED,
        index=True,
        comment="State of the latest verification request",
    )

    # Moderation
    is_banned: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, index=True
    )

    ban_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Session tracking
    last_activity: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Time of the last authenticated request",
    )

    session_timeout_minutes: Mapped[int] = mapped_column(
        nullable=False,
        default=DEFAULT_SESSION_TIMEOUT_MINUTES,
        comment="Idle minutes before the session is considered expired",
    )

    __table_args__ = (
        CheckConstraint(
            "session_timeout_minutes > 0", name="check_session_timeout_positive"
        ),
        Index("idx_user_role_created", "role", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role={self.role})>"

    @property
    def is_admin(self) -> bool:
        """Check if user is a platform administrator."""
        return self.role == UserRole.ADMIN

    @property
    def is_provider(self) -> bool:
        """Check if user is a mobile veterinary service provider."""
        return self.role == UserRole.MVS_PROVIDER

    def has_role(self, *roles: UserRole) -> bool:
        """Check whether the user holds any of the given roles."""
        return self.role in roles

    def session_expired(self, now: Optional[datetime] = None) -> bool:
        """
        Check whether the idle time since the last request exceeds the timeout.

        Accounts that have never made an authenticated request are not expired.
        """
        if self.last_activity is None:
            return False
        return minutes_since(self.last_activity, now) > self.session_timeout_minutes

    def touch(self, now: Optional[datetime] = None) -> None:
        """Record activity for session-timeout tracking."""
        self.last_activity = now or get_current_utc()

    def ban(self, reason: Optional[str] = None) -> None:
        """Ban the account."""
        self.is_banned = True
        self.ban_reason = reason

    def unban(self) -> None:
        """Lift a ban."""
        self.is_banned = False
        self.ban_reason = None

    def mark_verified(self) -> None:
        """Mark the account as verified by an administrator."""
        self.is_verified = True
        self.verification_status = VerificationStatus.APPROVED

    def public_info(self) -> Dict[str, Any]:
        """Fields safe to show on public provider pages."""
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "profileImage": self.profile_image,
            "isVerified": self.is_verified,
        }

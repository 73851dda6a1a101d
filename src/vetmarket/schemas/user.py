"""
User Pydantic schemas for authentication and account administration.

Registration fields are optional at the schema level so the auth service can
answer a missing field with its own message instead of a generic validation
error.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from ..models.user import UserRole, VerificationStatus
from .common import CamelModel, ResponseModel

MIN_PASSWORD_LENGTH = 6


class UserRegister(CamelModel):
    """Schema for account registration."""

    email: Optional[str] = Field(None, description="Login email")
    password: Optional[str] = Field(None, description="Plain-text password")
    role: Optional[str] = Field(
        None, description="Role value or display name (e.g. 'Mobile Vet Provider')"
    )
    name: Optional[str] = Field(None, max_length=200, description="Display name")
    phone_number: Optional[str] = Field(None, max_length=30)

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: Optional[str]) -> Optional[str]:
        """Validate the minimum password length."""
        if v is not None and v and len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        return v


class UserLogin(CamelModel):
    """Schema for login."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(ResponseModel):
    """Schema for user data returned by the API (never includes the hash)."""

    id: UUID
    email: str
    name: Optional[str] = None
    role: UserRole
    phone_number: Optional[str] = None
    profile_image: Optional[str] = None
    is_verified: bool
    verification_status: VerificationStatus
    is_banned: bool
    ban_reason: Optional[str] = None
    last_activity: Optional[datetime] = None
    created_at: datetime


class BanRequest(CamelModel):
    """Schema for banning a user."""

    reason: Optional[str] = Field(None, max_length=500)

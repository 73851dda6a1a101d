"""
SQLAlchemy models for the vetmarket package.

Importing this package registers every table on ``Base.metadata``.
"""

from .appointment import Appointment, AppointmentStatus
from .availability import Availability
from .base import Base, BaseModel
from .profile import MANUAL_DORA_SOURCE, AnimalType, DoraStatus, VisitingVetProfile
from .review import ModerationStatus, Review
from .service import CustomFieldType, OfferedLocation, PriceType, Service
from .template import DocumentTemplate
from .user import ROLE_DISPLAY_NAMES, User, UserRole, VerificationStatus
from .verification import (
    AdminActionLog,
    AdminActionType,
    VerificationRequest,
    VerificationRequestStatus,
)

__all__ = [
    "Base",
    "BaseModel",
    # Accounts
    "User",
    "UserRole",
    "VerificationStatus",
    "ROLE_DISPLAY_NAMES",
    # Providers
    "VisitingVetProfile",
    "AnimalType",
    "DoraStatus",
    "MANUAL_DORA_SOURCE",
    "Service",
    "PriceType",
    "OfferedLocation",
    "CustomFieldType",
    "Availability",
    # Visits and reviews
    "Appointment",
    "AppointmentStatus",
    "Review",
    "ModerationStatus",
    # Administration
    "VerificationRequest",
    "VerificationRequestStatus",
    "AdminActionLog",
    "AdminActionType",
    "DocumentTemplate",
]

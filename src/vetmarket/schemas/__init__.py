"""
Pydantic schemas for the vetmarket API.

Schemas accept camelCase or snake_case input and serialize to camelCase.
"""

from .appointment import AppointmentCreate, AppointmentResponse, AppointmentStatusUpdate
from .availability import (
    AvailabilityCheckResponse,
    AvailabilityResponse,
    AvailabilityUpdate,
    PublicAvailabilityResponse,
    SpecialDateEntry,
    WeeklyScheduleEntry,
)
from .common import CamelModel, PaginationInfo, ResponseModel
from .profile import (
    ProfileDetailResponse,
    ProfileResponse,
    ProfileWrite,
    PublicUserInfo,
)
from .review import (
    ProviderResponseCreate,
    ReviewCreate,
    ReviewModeration,
    ReviewResponse,
    ReviewUpdate,
)
from .service import CustomFieldSchema, ServiceCreate, ServiceResponse, ServiceUpdate
from .template import BrandingOptions, RenderRequest, TemplateCreate, TemplateResponse
from .user import BanRequest, UserLogin, UserRegister, UserResponse
from .verification import (
    AdminActionLogResponse,
    BulkItemResult,
    BulkVerificationRequest,
    BulkVerificationResult,
    ManualVerificationRequest,
    RejectionRequest,
    VerificationDocument,
    VerificationRequestCreate,
    VerificationRequestResponse,
)

__all__ = [
    "CamelModel",
    "ResponseModel",
    "PaginationInfo",
    # Accounts
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "BanRequest",
    # Profiles
    "ProfileWrite",
    "ProfileResponse",
    "ProfileDetailResponse",
    "PublicUserInfo",
    # Services
    "CustomFieldSchema",
    "ServiceCreate",
    "ServiceUpdate",
    "ServiceResponse",
    # Availability
    "WeeklyScheduleEntry",
    "SpecialDateEntry",
    "AvailabilityUpdate",
    "AvailabilityResponse",
    "PublicAvailabilityResponse",
    "AvailabilityCheckResponse",
    # Appointments
    "AppointmentCreate",
    "AppointmentStatusUpdate",
    "AppointmentResponse",
    # Reviews
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewModeration",
    "ProviderResponseCreate",
    "ReviewResponse",
    # Verification and administration
    "VerificationDocument",
    "VerificationRequestCreate",
    "VerificationRequestResponse",
    "RejectionRequest",
    "BulkVerificationRequest",
    "BulkItemResult",
    "BulkVerificationResult",
    "ManualVerificationRequest",
    "AdminActionLogResponse",
    # Documents
    "BrandingOptions",
    "TemplateCreate",
    "TemplateResponse",
    "RenderRequest",
]

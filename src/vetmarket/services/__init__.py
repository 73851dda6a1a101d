"""
Business logic for the vetmarket API.

Each service wraps an ``AsyncSession`` and raises ``VetMarketException``
subclasses; the API layer turns those into response envelopes.
"""

from .admin import AdminService
from .appointments import AppointmentService
from .auth import AuthService
from .availability import AvailabilityService
from .catalog import CatalogService
from .certificates import generate_provider_certificate
from .profiles import ProfileService
from .rendering import find_template, render_template
from .reviews import ReviewService
from .templates import TemplateService
from .verification import VerificationService

__all__ = [
    "AdminService",
    "AppointmentService",
    "AuthService",
    "AvailabilityService",
    "CatalogService",
    "ProfileService",
    "ReviewService",
    "TemplateService",
    "VerificationService",
    "find_template",
    "render_template",
    "generate_provider_certificate",
]

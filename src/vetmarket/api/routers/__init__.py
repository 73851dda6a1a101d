"""
API routers, one module per resource.
"""

from . import (
    admin,
    appointments,
    auth,
    availability,
    documents,
    profiles,
    reviews,
    services,
    verification,
)

__all__ = [
    "admin",
    "appointments",
    "auth",
    "availability",
    "documents",
    "profiles",
    "reviews",
    "services",
    "verification",
]

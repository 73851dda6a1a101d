"""
Vetmarket

Backend for a mobile veterinary services marketplace: visiting vets publish a
profile, priced services and a weekly schedule; pet owners and clinics find
them, book, and review completed visits; administrators verify accounts,
moderate reviews and record manual DORA licence checks.

The package contains:

- SQLAlchemy models for users, provider profiles, services, availability,
  appointments, reviews, verification requests, admin action logs and
  document templates
- Pydantic schemas for request/response validation with camelCase JSON
- Async database utilities (engine, session manager, health checks)
- Service classes holding the business rules
- A FastAPI application exposing the JSON API
- PDF/HTML document rendering for provider certificates

Quick Start:
    >>> from vetmarket.api import create_app
    >>> app = create_app()

    >>> from vetmarket.database import SessionManager, create_engine
    >>> from vetmarket.services import ProfileService
    >>> manager = SessionManager(create_engine("sqlite+aiosqlite:///vetmarket.db"))
    >>> async with manager.get_session() as session:
    ...     profiles = await ProfileService(session).list_profiles()

Requirements:
    - Python 3.11+
    - PostgreSQL 13+ (SQLite is used for tests)
    - SQLAlchemy 2.0+
    - Pydantic 2.5+
"""

__version__ = "0.1.0"
__author__ = "Vetmarket Team"
__license__ = "MIT"

from . import database
from . import exceptions
from . import models
from . import schemas
from . import utils

from .database import SessionManager, create_engine
from .exceptions import NotFoundException, ValidationException, VetMarketException
from .models import Service, User, VisitingVetProfile

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "database",
    "exceptions",
    "models",
    "schemas",
    "utils",
    "create_engine",
    "SessionManager",
    "VetMarketException",
    "ValidationException",
    "NotFoundException",
    "User",
    "VisitingVetProfile",
    "Service",
]

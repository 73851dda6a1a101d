"""
Pytest configuration and fixtures for vetmarket tests.

Every test runs against its own SQLite file so API requests (which open their
own sessions) and direct database checks see the same committed data.
Factories create committed rows; ``auth_headers`` builds a bearer header for
any user.
"""

import uuid
from datetime import datetime, timedelta
from typing import AsyncGenerator, Dict

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from vetmarket.api import create_app
from vetmarket.database.connection import create_engine
from vetmarket.database.session import SessionManager
from vetmarket.models import (
    Appointment,
    AppointmentStatus,
    Availability,
    Base,
    DocumentTemplate,
    ModerationStatus,
    Review,
    Service,
    User,
    UserRole,
    VerificationRequest,
    VisitingVetProfile,
)
from vetmarket.utils.config import AppSettings
from vetmarket.utils.datetime_utils import get_current_utc
from vetmarket.utils.security import create_access_token, hash_password

TEST_PASSWORD = "password123"

# bcrypt is deliberately slow; hash once for every factory-built user
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    """Settings bound to a throwaway SQLite database."""
    return AppSettings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'vetmarket_test.db'}",
        jwt_secret="test-secret",
        jwt_expires_minutes=60,
    )


@pytest_asyncio.fixture
async def test_engine(settings: AppSettings) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_engine(settings.database_url)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session_manager(
    test_engine: AsyncEngine,
) -> AsyncGenerator[SessionManager, None]:
    """Session manager with all tables created."""
    session_manager = SessionManager(test_engine)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield session_manager

    await session_manager.close_all_sessions()


@pytest_asyncio.fixture
async def async_session(
    test_session_manager: SessionManager,
) -> AsyncGenerator[AsyncSession, None]:
    """A session for arranging data and checking results directly."""
    async with test_session_manager.get_session() as session:
        yield session


@pytest.fixture
def app(settings: AppSettings, test_session_manager: SessionManager):
    return create_app(settings, session_manager=test_session_manager)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client calling the application in-process."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers(settings: AppSettings):
    """Build an ``Authorization`` header for a user."""

    def _headers(user: User, **token_kwargs) -> Dict[str, str]:
        token = create_access_token(
            user.id,
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            extra_claims={"role": user.role.value},
            **token_kwargs,
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


# Factory classes for creating test entities
class UserFactory:
    """Factory for creating test User instances."""

    @staticmethod
    def build(**kwargs) -> User:
        """Build a User instance without saving to database."""
        defaults = {
            "email": f"test_{uuid.uuid4().hex[:8]}@example.com",
            "password_hash": TEST_PASSWORD_HASH,
            "name": "Test User",
            "role": UserRole.PET_OWNER,
        }
        defaults.update(kwargs)
        return User(**defaults)

    @staticmethod
    async def create(session: AsyncSession, **kwargs) -> User:
        """Create and commit a User."""
        user = UserFactory.build(**kwargs)
        session.add(user)
        await session.commit()
        return user

    @staticmethod
    async def create_provider(session: AsyncSession, **kwargs) -> User:
        kwargs.setdefault("role", UserRole.MVS_PROVIDER)
        kwargs.setdefault("name", "Dr. Test Provider")
        return await UserFactory.create(session, **kwargs)

    @staticmethod
    async def create_admin(session: AsyncSession, **kwargs) -> User:
        kwargs.setdefault("role", UserRole.ADMIN)
        kwargs.setdefault("name", "Admin User")
        return await UserFactory.create(session, **kwargs)


class ProfileFactory:
    """Factory for creating test VisitingVetProfile instances."""

    @staticmethod
    def build(user_id: uuid.UUID, **kwargs) -> VisitingVetProfile:
        defaults = {
            "user_id": user_id,
            "bio": "Mobile veterinarian serving the Denver metro area.",
            "license_info": "CO-VET-12345",
            "insurance_info": "Liability policy LP-998877",
            "years_experience": 8,
            "service_area_zip_codes": ["80202", "80203"],
            "animal_types": ["Small Animal"],
            "specialty_services": ["Dentistry"],
            "business_name": "Paws On Wheels",
        }
        defaults.update(kwargs)
        return VisitingVetProfile(**defaults)

    @staticmethod
    async def create(session: AsyncSession, user: User, **kwargs) -> VisitingVetProfile:
        profile = ProfileFactory.build(user.id, **kwargs)
        session.add(profile)
        await session.commit()
        return profile


class ServiceFactory:
    """Factory for creating test Service instances."""

    @staticmethod
    def build(profile_id: uuid.UUID, **kwargs) -> Service:
        defaults = {
            "profile_id": profile_id,
            "name": "Wellness Exam",
            "description": "Annual wellness exam at home",
            "estimated_duration_minutes": 45,
            "price": 120.0,
        }
        defaults.update(kwargs)
        service = Service(**defaults)
        service.apply_pricing_mode()
        return service

    @staticmethod
    async def create(session: AsyncSession, profile: VisitingVetProfile, **kwargs) -> Service:
        service = ServiceFactory.build(profile.id, **kwargs)
        session.add(service)
        await session.commit()
        return service


class AvailabilityFactory:
    """Factory for creating test Availability instances."""

    WEEKDAYS_NINE_TO_FIVE = [
        {"day_of_week": day, "start_time": "09:00", "end_time": "17:00", "is_available": True}
        for day in range(1, 6)
    ]

    @staticmethod
    async def create(
        session: AsyncSession, profile: VisitingVetProfile, **kwargs
    ) -> Availability:
        kwargs.setdefault("weekly_schedule", list(AvailabilityFactory.WEEKDAYS_NINE_TO_FIVE))
        availability = Availability(profile_id=profile.id, **kwargs)
        session.add(availability)
        await session.commit()
        return availability


class AppointmentFactory:
    """Factory for creating test Appointment instances."""

    @staticmethod
    async def create(
        session: AsyncSession,
        pet_owner: User,
        profile: VisitingVetProfile,
        **kwargs,
    ) -> Appointment:
        defaults = {
            "pet_owner_id": pet_owner.id,
            "provider_profile_id": profile.id,
            "appointment_time": get_current_utc() - timedelta(days=2),
            "status": AppointmentStatus.COMPLETED,
        }
        defaults.update(kwargs)
        appointment = Appointment(**defaults)
        session.add(appointment)
        await session.commit()
        return appointment


class ReviewFactory:
    """Factory for creating test Review instances (with their appointment)."""

    @staticmethod
    async def create(
        session: AsyncSession,
        pet_owner: User,
        profile: VisitingVetProfile,
        **kwargs,
    ) -> Review:
        appointment = await AppointmentFactory.create(session, pet_owner, profile)
        defaults = {
            "rating": 5,
            "comment": "Gentle and thorough with our anxious cat.",
            "reviewer_id": pet_owner.id,
            "provider_profile_id": profile.id,
            "appointment_id": appointment.id,
            "moderation_status": ModerationStatus.PENDING,
        }
        defaults.update(kwargs)
        review = Review(**defaults)
        session.add(review)
        await session.commit()
        return review


class VerificationRequestFactory:
    @staticmethod
    async def create(session: AsyncSession, user: User, **kwargs) -> VerificationRequest:
        defaults = {
            "user_id": user.id,
            "documents": [{"name": "License", "url": "https://files.example.com/license.pdf"}],
        }
        defaults.update(kwargs)
        request = VerificationRequest(**defaults)
        session.add(request)
        await session.commit()
        return request


class TemplateFactory:
    """Factory for creating test DocumentTemplate instances."""

    @staticmethod
    def build(**kwargs) -> DocumentTemplate:
        defaults = {
            "name": f"Template {uuid.uuid4().hex[:6]}",
            "layout_configuration": {
                "title": "Provider Verification Certificate",
                "fields": [
                    {"key": "providerName", "label": "Provider"},
                    {"key": "licenseInfo", "label": "License"},
                    "doraStatus",
                ],
                "footer": "Issued by Vetmarket",
            },
            "branding_options": {"primaryColor": "#1a73e8", "secondaryColor": "#f1f3f4"},
            "is_default": False,
        }
        defaults.update(kwargs)
        return DocumentTemplate(**defaults)

    @staticmethod
    async def create(session: AsyncSession, **kwargs) -> DocumentTemplate:
        template = TemplateFactory.build(**kwargs)
        session.add(template)
        await session.commit()
        return template


# Pytest fixtures for factories
@pytest.fixture
def user_factory():
    return UserFactory


@pytest.fixture
def profile_factory():
    return ProfileFactory


@pytest.fixture
def service_factory():
    return ServiceFactory


@pytest.fixture
def availability_factory():
    return AvailabilityFactory


@pytest.fixture
def appointment_factory():
    return AppointmentFactory


@pytest.fixture
def review_factory():
    return ReviewFactory


@pytest.fixture
def verification_request_factory():
    return VerificationRequestFactory


@pytest.fixture
def template_factory():
    return TemplateFactory


# Ready-made accounts
@pytest_asyncio.fixture
async def pet_owner(async_session: AsyncSession) -> User:
    return await UserFactory.create(async_session, name="Pat Owner")


@pytest_asyncio.fixture
async def provider(async_session: AsyncSession) -> User:
    return await UserFactory.create_provider(async_session)


@pytest_asyncio.fixture
async def admin_user(async_session: AsyncSession) -> User:
    return await UserFactory.create_admin(async_session)


@pytest_asyncio.fixture
async def provider_profile(async_session: AsyncSession, provider: User) -> VisitingVetProfile:
    return await ProfileFactory.create(async_session, provider)


@pytest.fixture
def fixed_datetime() -> datetime:
    """A Wednesday used by schedule tests."""
    return datetime(2024, 6, 5, 10, 30)

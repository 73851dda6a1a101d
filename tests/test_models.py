"""
Tests for the SQLAlchemy models.

Covers defaults, domain helpers and the table constraints that guard the
data (single pricing view, one profile per provider, one review per
appointment).
"""

import uuid
from datetime import date, datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from vetmarket.models import (
    AnimalType,
    Availability,
    DoraStatus,
    ModerationStatus,
    OfferedLocation,
    PriceType,
    Review,
    Service,
    User,
    UserRole,
    VerificationRequest,
    VerificationRequestStatus,
    VerificationStatus,
    VisitingVetProfile,
)
from vetmarket.models.profile import MANUAL_DORA_SOURCE
from vetmarket.models.user import DEFAULT_PROFILE_IMAGE, DEFAULT_SESSION_TIMEOUT_MINUTES
from vetmarket.utils.datetime_utils import get_current_utc


class TestUserModel:
    """Test cases for the User model."""

    def test_user_creation_defaults(self):
        user = User(email="  Owner@Example.COM ", password_hash="x")

        assert user.email == "owner@example.com"
        assert user.role == UserRole.PET_OWNER
        assert user.profile_image == DEFAULT_PROFILE_IMAGE
        assert user.is_verified is False
        assert user.verification_status == VerificationStatus.NOT_SUBMITTED
        assert user.is_banned is False
        assert user.session_timeout_minutes == DEFAULT_SESSION_TIMEOUT_MINUTES

    def test_role_helpers(self):
        admin = User(email="a@example.com", password_hash="x", role=UserRole.ADMIN)
        provider = User(email="p@example.com", password_hash="x", role=UserRole.MVS_PROVIDER)

        assert admin.is_admin
        assert not admin.is_provider
        assert provider.is_provider
        assert provider.has_role(UserRole.PET_OWNER, UserRole.MVS_PROVIDER)
        assert not provider.has_role(UserRole.ADMIN)

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("Mobile Vet Provider", UserRole.MVS_PROVIDER),
            ("Pet Owner", UserRole.PET_OWNER),
            ("Veterinary Clinic", UserRole.CLINIC),
            ("MVSProvider", UserRole.MVS_PROVIDER),
            ("ADMIN", UserRole.ADMIN),
            (UserRole.CLINIC, UserRole.CLINIC),
        ],
    )
    def test_role_normalize(self, value, expected):
        assert UserRole.normalize(value) == expected

    def test_role_normalize_rejects_unknown(self):
        with pytest.raises(ValueError, match="Invalid role"):
            UserRole.normalize("Groomer")

    def test_ban_and_unban(self):
        user = User(email="b@example.com", password_hash="x")

        user.ban("Spam")
        assert user.is_banned is True
        assert user.ban_reason == "Spam"

        user.unban()
        assert user.is_banned is False
        assert user.ban_reason is None

    def test_mark_verified(self):
        user = User(email="v@example.com", password_hash="x")
        user.mark_verified()

        assert user.is_verified is True
        assert user.verification_status == VerificationStatus.APPROVED

    def test_session_expired(self):
        user = User(email="s@example.com", password_hash="x", session_timeout_minutes=30)
        now = get_current_utc()

        assert user.session_expired(now) is False  # never active

        user.touch(now - timedelta(minutes=10))
        assert user.session_expired(now) is False

        user.touch(now - timedelta(minutes=31))
        assert user.session_expired(now) is True

    def test_public_info_hides_credentials(self):
        user = User(id=uuid.uuid4(), email="p@example.com", password_hash="secret", name="Dr. P")
        info = user.public_info()

        assert info["name"] == "Dr. P"
        assert "passwordHash" not in info
        assert "password_hash" not in info

    async def test_email_is_unique(self, async_session, user_factory):
        await user_factory.create(async_session, email="dup@example.com")

        with pytest.raises(IntegrityError):
            await user_factory.create(async_session, email="dup@example.com")
        await async_session.rollback()


class TestVisitingVetProfileModel:
    """Test cases for the VisitingVetProfile model."""

    def test_profile_defaults(self):
        profile = VisitingVetProfile(
            user_id=uuid.uuid4(), bio="Bio", license_info="L", insurance_info="I"
        )

        assert profile.credentials == []
        assert profile.years_experience == 0
        assert profile.animal_types == [AnimalType.SMALL_ANIMAL.value]
        assert profile.average_rating == 0.0
        assert profile.number_of_reviews == 0
        assert profile.dora_status == DoraStatus.NOT_VERIFIED
        assert profile.is_dora_verified is False

    def test_service_area_helpers(self):
        profile = VisitingVetProfile(
            user_id=uuid.uuid4(),
            bio="Bio",
            license_info="L",
            insurance_info="I",
            service_area_zip_codes=["80202"],
            animal_types=["Equine", "Large Animal"],
            specialty_services=["Dentistry"],
        )

        assert profile.serves_zip_code("80202")
        assert not profile.serves_zip_code("10001")
        assert profile.treats_any(["Exotic", "Equine"])
        assert not profile.treats_any(["Avian"])
        assert profile.offers_any_specialty(["Dentistry"])

    def test_record_dora_check(self):
        admin_id = uuid.uuid4()
        checked = datetime(2024, 5, 1, 12, 0)
        profile = VisitingVetProfile(
            user_id=uuid.uuid4(), bio="Bio", license_info="L", insurance_info="I"
        )

        profile.record_dora_check(DoraStatus.VERIFIED_VALID, checked, admin_id)

        assert profile.is_dora_verified
        block = profile.dora_verification
        assert block["status"] == "Verified - Valid"
        assert block["lastChecked"] == checked.isoformat()
        assert block["verifiedByAdminId"] == str(admin_id)
        assert block["source"] == MANUAL_DORA_SOURCE

    async def test_one_profile_per_provider(self, async_session, provider, profile_factory):
        await profile_factory.create(async_session, provider)

        with pytest.raises(IntegrityError):
            await profile_factory.create(async_session, provider)
        await async_session.rollback()


class TestServiceModel:
    """Test cases for the Service model."""

    def test_service_defaults(self):
        service = Service(
            profile_id=uuid.uuid4(), name="Exam", description="d", estimated_duration_minutes=30
        )

        assert service.has_public_pricing is True
        assert service.has_different_pricing is False
        assert service.price_type == PriceType.FLAT
        assert service.offered_location == OfferedLocation.IN_HOME
        assert service.animal_type == AnimalType.SMALL_ANIMAL
        assert service.custom_fields == []

    def test_apply_pricing_mode_flat(self):
        service = Service(
            profile_id=uuid.uuid4(),
            name="Exam",
            description="d",
            estimated_duration_minutes=30,
            price=100.0,
            b2b_price=80.0,
            b2c_price=110.0,
        )
        service.apply_pricing_mode()

        assert service.price == 100.0
        assert service.b2b_price is None
        assert service.b2c_price is None

    def test_apply_pricing_mode_dual(self):
        service = Service(
            profile_id=uuid.uuid4(),
            name="Exam",
            description="d",
            estimated_duration_minutes=30,
            price=100.0,
            b2b_price=80.0,
            b2c_price=110.0,
            has_different_pricing=True,
        )
        service.apply_pricing_mode()

        assert service.price is None
        assert service.b2b_price == 80.0
        assert service.b2c_price == 110.0

    def test_belongs_to(self):
        profile_id = uuid.uuid4()
        service = Service(profile_id=profile_id, name="x", description="d", estimated_duration_minutes=5)

        assert service.belongs_to(profile_id)
        assert not service.belongs_to(uuid.uuid4())

    async def test_single_pricing_view_constraint(self, async_session, provider_profile):
        service = Service(
            profile_id=provider_profile.id,
            name="Exam",
            description="d",
            estimated_duration_minutes=30,
            price=100.0,
            b2b_price=80.0,
        )
        async_session.add(service)

        with pytest.raises(IntegrityError):
            await async_session.commit()
        await async_session.rollback()


class TestAvailabilityModel:
    """Test cases for Availability.is_time_available."""

    @pytest.fixture
    def availability(self):
        return Availability(
            profile_id=uuid.uuid4(),
            weekly_schedule=[
                # 0 = Sunday, 3 = Wednesday
                {"day_of_week": 3, "start_time": "09:00", "end_time": "17:00", "is_available": True},
                {"day_of_week": 0, "start_time": "10:00", "end_time": "12:00", "is_available": True},
                {"day_of_week": 4, "start_time": "09:00", "end_time": "17:00", "is_available": False},
            ],
            special_dates=[
                {"date": "2024-06-12", "is_available": False, "note": "Conference"},
                {"date": "2024-06-19", "is_available": True, "start_time": "13:00", "end_time": "15:00"},
                {"date": "2024-06-15", "is_available": True},
            ],
        )

    def test_within_weekly_hours(self, availability, fixed_datetime):
        assert availability.is_time_available(fixed_datetime)  # Wed 10:30

    def test_bounds_are_inclusive(self, availability):
        assert availability.is_time_available(datetime(2024, 6, 5, 9, 0))
        assert availability.is_time_available(datetime(2024, 6, 5, 17, 0))
        assert not availability.is_time_available(datetime(2024, 6, 5, 17, 1))
        assert not availability.is_time_available(datetime(2024, 6, 5, 8, 59))

    def test_sunday_is_day_zero(self, availability):
        assert availability.is_time_available(datetime(2024, 6, 9, 11, 0))  # Sunday

    def test_day_without_entry_is_unavailable(self, availability):
        assert not availability.is_time_available(datetime(2024, 6, 4, 10, 0))  # Tuesday

    def test_day_marked_unavailable(self, availability):
        assert not availability.is_time_available(datetime(2024, 6, 6, 10, 0))  # Thursday

    def test_special_date_closes_day(self, availability):
        assert not availability.is_time_available(datetime(2024, 6, 12, 10, 0))

    def test_special_date_overrides_hours(self, availability):
        assert not availability.is_time_available(datetime(2024, 6, 19, 10, 0))
        assert availability.is_time_available(datetime(2024, 6, 19, 14, 0))

    def test_special_date_without_hours_is_all_day(self, availability):
        # Saturday has no weekly entry
        assert availability.is_time_available(datetime(2024, 6, 15, 20, 0))

    def test_special_date_lookup(self, availability):
        assert availability.special_date_for(date(2024, 6, 12))["note"] == "Conference"
        assert availability.special_date_for(date(2024, 6, 13)) is None

    def test_hours_for(self, availability):
        assert availability.hours_for(date(2024, 6, 5)) == (540, 1020)
        assert availability.hours_for(date(2024, 6, 19)) == (780, 900)
        assert availability.hours_for(date(2024, 6, 15)) == (0, 24 * 60)
        assert availability.hours_for(date(2024, 6, 12)) is None

    def test_visit_must_end_before_closing(self, availability):
        assert availability.can_fit(datetime(2024, 6, 5, 16, 15), 45)
        assert not availability.can_fit(datetime(2024, 6, 5, 16, 30), 45)
        assert not availability.can_fit(datetime(2024, 6, 5, 8, 45), 30)

    def test_visit_uses_special_date_hours(self, availability):
        assert availability.can_fit(datetime(2024, 6, 19, 13, 0), 120)
        assert not availability.can_fit(datetime(2024, 6, 19, 10, 0), 30)
        assert not availability.can_fit(datetime(2024, 6, 12, 10, 0), 30)


class TestReviewModel:
    def test_review_defaults_to_pending(self):
        review = Review(
            rating=4,
            comment="Good",
            reviewer_id=uuid.uuid4(),
            provider_profile_id=uuid.uuid4(),
            appointment_id=uuid.uuid4(),
        )
        assert review.moderation_status == ModerationStatus.PENDING
        assert not review.is_approved

    def test_moderate_and_respond(self):
        review = Review(
            rating=4,
            comment="Good",
            reviewer_id=uuid.uuid4(),
            provider_profile_id=uuid.uuid4(),
            appointment_id=uuid.uuid4(),
        )
        review.moderate(ModerationStatus.APPROVED, "Looks fine")
        review.respond("Thank you!")

        assert review.is_approved
        assert review.moderator_notes == "Looks fine"
        assert review.provider_response_comment == "Thank you!"
        assert review.provider_response_date is not None

    async def test_rating_range_constraint(
        self, async_session, pet_owner, provider_profile, review_factory
    ):
        with pytest.raises(IntegrityError):
            await review_factory.create(async_session, pet_owner, provider_profile, rating=6)
        await async_session.rollback()


class TestVerificationRequestModel:
    def test_approve_and_reject(self):
        admin_id = uuid.uuid4()
        request = VerificationRequest(user_id=uuid.uuid4())
        assert request.is_pending

        request.approve(admin_id)
        assert request.status == VerificationRequestStatus.APPROVED
        assert request.reviewed_by_id == admin_id
        assert request.reviewed_at is not None

        other = VerificationRequest(user_id=uuid.uuid4())
        other.reject(admin_id, "Blurry scan")
        assert other.status == VerificationRequestStatus.REJECTED
        assert other.rejection_reason == "Blurry scan"

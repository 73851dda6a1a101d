"""
Visiting vet profile operations.

Profiles are keyed on the owning user: writing a profile for a user who
already has one updates it in place.
"""

import json
import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy import String, cast, func, or_, select, type_coerce
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..exceptions import NotFoundException, ValidationException
from ..models.profile import VisitingVetProfile
from ..models.user import User, UserRole
from ..schemas.profile import REQUIRED_PROFILE_FIELDS, ProfileWrite
from ..utils.validation import validate_zip_code

logger = logging.getLogger(__name__)

PROFILE_NOT_FOUND = "Profile not found"
PROVIDER_NOT_FOUND = "Visiting vet provider not found"

# Columns that keep their current value when a write sends null
NON_NULL_PROFILE_FIELDS = REQUIRED_PROFILE_FIELDS + (
    "credentials",
    "years_experience",
    "service_area_zip_codes",
    "clinic_affiliations",
    "use_external_scheduling",
    "animal_types",
    "specialty_services",
)


def json_list_contains(column, value: str, dialect_name: str = "sqlite"):
    """
    Match rows whose JSON string array holds ``value``.

    PostgreSQL uses JSONB containment (``@>``). Other databases store the
    array as text written by ``json.dumps``, so the quoted item is searched
    for in that text with the same escaping.
    """
    if dialect_name == "postgresql":
        return type_coerce(column, JSONB).contains([value])
    return cast(column, String).contains(json.dumps(value), autoescape=True)


class ProfileService:
    """Business logic for visiting vet profiles."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(
        self, user_id: uuid.UUID, with_services: bool = False
    ) -> Optional[VisitingVetProfile]:
        """Return the profile owned by ``user_id``, if any."""
        query = select(VisitingVetProfile).where(VisitingVetProfile.user_id == user_id)
        if with_services:
            query = query.options(selectinload(VisitingVetProfile.services)).execution_options(
                populate_existing=True
            )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_id(self, profile_id: uuid.UUID) -> Optional[VisitingVetProfile]:
        return await self.session.get(VisitingVetProfile, profile_id)

    async def require_own_profile(
        self, user: User, with_services: bool = False
    ) -> VisitingVetProfile:
        """
        Return the caller's profile.

        Raises:
            NotFoundException: If the caller has not created a profile yet
        """
        profile = await self.get_by_user_id(user.id, with_services=with_services)
        if profile is None:
            raise NotFoundException(PROFILE_NOT_FOUND, resource="VisitingVetProfile")
        return profile

    async def upsert_profile(
        self, user: User, payload: ProfileWrite
    ) -> Tuple[VisitingVetProfile, bool]:
        """
        Create the caller's profile, or update it if it already exists.

        Args:
            user: Authenticated provider
            payload: Fields to write; only supplied fields change on update

        Returns:
            Tuple of the profile and whether it was newly created

        Raises:
            ValidationException: If a new profile lacks a required field, or
                external scheduling is enabled without a booking URL
        """
        updates = {
            name: value
            for name, value in payload.model_fields_for_update().items()
            if value is not None or name not in NON_NULL_PROFILE_FIELDS
        }
        profile = await self.get_by_user_id(user.id)
        created = profile is None

        if created:
            missing = [name for name in REQUIRED_PROFILE_FIELDS if not updates.get(name)]
            if missing:
                raise ValidationException(
                    "Please provide bio, license info and insurance info",
                    validation_errors={"missing": missing},
                )

        use_external = updates.get(
            "use_external_scheduling", False if created else profile.use_external_scheduling
        )
        external_url = updates.get(
            "external_scheduling_url", None if created else profile.external_scheduling_url
        )
        if use_external and not external_url:
            raise ValidationException(
                "External scheduling URL is required when external scheduling is enabled",
                field="externalSchedulingUrl",
            )

        if created:
            profile = VisitingVetProfile(user_id=user.id, **updates)
            self.session.add(profile)
        else:
            profile.update_fields(**updates)

        await self.session.commit()
        logger.info(
            f"{'Created' if created else 'Updated'} profile {profile.id} for user {user.id}"
        )
        return profile, created

    async def list_profiles(self) -> List[VisitingVetProfile]:
        """All provider profiles, newest first."""
        result = await self.session.execute(
            select(VisitingVetProfile).order_by(VisitingVetProfile.created_at.desc())
        )
        return list(result.scalars().all())

    async def search_profiles(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        animal_types: Optional[List[str]] = None,
        specialty_services: Optional[List[str]] = None,
        location: Optional[str] = None,
    ) -> Tuple[List[VisitingVetProfile], int]:
        """
        Search provider profiles.

        Args:
            page: 1-based page number
            limit: Page size
            search: Case-insensitive text over business name, bio, service
                area description and licence info
            animal_types: Match profiles treating any of these
            specialty_services: Match profiles offering any of these
            location: ZIP code that must be in the service area

        Returns:
            Tuple of the page of profiles and the total match count
        """
        query = (
            select(VisitingVetProfile)
            .join(User, User.id == VisitingVetProfile.user_id)
            .where(User.role == UserRole.MVS_PROVIDER)
        )
        dialect_name = self.session.get_bind().dialect.name

        if search:
            term = search.strip()
            query = query.where(
                or_(
                    VisitingVetProfile.business_name.icontains(term, autoescape=True),
                    VisitingVetProfile.bio.icontains(term, autoescape=True),
                    VisitingVetProfile.service_area_description.icontains(term, autoescape=True),
                    VisitingVetProfile.license_info.icontains(term, autoescape=True),
                )
            )
        if animal_types:
            query = query.where(
                or_(
                    *(
                        json_list_contains(VisitingVetProfile.animal_types, t, dialect_name)
                        for t in animal_types
                    )
                )
            )
        if specialty_services:
            query = query.where(
                or_(
                    *(
                        json_list_contains(VisitingVetProfile.specialty_services, s, dialect_name)
                        for s in specialty_services
                    )
                )
            )
        if location:
            zip_result = validate_zip_code(location)
            if not zip_result.is_valid:
                raise ValidationException(
                    zip_result.errors[0].message, field="location", value=location
                )
            query = query.where(
                json_list_contains(
                    VisitingVetProfile.service_area_zip_codes, zip_result.value, dialect_name
                )
            )

        total = await self.session.scalar(
            select(func.count()).select_from(query.subquery())
        )
        result = await self.session.execute(
            query.order_by(VisitingVetProfile.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def get_public_profile(
        self, user_id: uuid.UUID
    ) -> Tuple[VisitingVetProfile, User]:
        """
        Look up a provider's profile by the provider's user id.

        Raises:
            NotFoundException: If the user is missing, is not a provider, or
                has no profile
        """
        user = await self.session.get(User, user_id)
        if user is None or not user.is_provider:
            raise NotFoundException(PROVIDER_NOT_FOUND, resource="User", resource_id=user_id)

        profile = await self.get_by_user_id(user_id, with_services=True)
        if profile is None:
            raise NotFoundException(
                PROVIDER_NOT_FOUND, resource="VisitingVetProfile", resource_id=user_id
            )
        return profile, user

"""Profile router - visiting vet profiles"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...models.user import User
from ...schemas.common import PaginationInfo
from ...schemas.profile import (
    ProfileDetailResponse,
    ProfileResponse,
    ProfileWrite,
    PublicUserInfo,
)
from ...services.certificates import generate_provider_certificate
from ...services.profiles import ProfileService
from ...utils.validation import parse_csv_list
from ..deps import get_db_session, require_provider
from ..responses import envelope, serialize, serialize_many
from .documents import document_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profiles", tags=["Profiles"])


def get_profile_service(session: AsyncSession = Depends(get_db_session)) -> ProfileService:
    """Dependency injection for ProfileService"""
    return ProfileService(session)


@router.post("/visiting-vet")
async def upsert_visiting_vet_profile(
    payload: ProfileWrite,
    user: User = Depends(require_provider),
    service: ProfileService = Depends(get_profile_service),
):
    """Create the caller's profile, or update it in place when it exists"""
    profile, created = await service.upsert_profile(user, payload)
    return envelope(
        serialize(ProfileResponse, profile),
        message="Profile created successfully" if created else "Profile updated successfully",
        status_code=201 if created else 200,
    )


@router.get("/visiting-vet/me")
async def get_my_profile(
    user: User = Depends(require_provider),
    service: ProfileService = Depends(get_profile_service),
):
    profile = await service.require_own_profile(user, with_services=True)
    return envelope(serialize(ProfileDetailResponse, profile))


@router.get("/visiting-vet/me/certificate")
async def get_my_certificate(
    format: str = Query("pdf"),
    template_id: Optional[uuid.UUID] = Query(None, alias="templateId"),
    user: User = Depends(require_provider),
    session: AsyncSession = Depends(get_db_session),
):
    """Verification certificate for a provider whose DORA check is Verified - Valid"""
    profile = await ProfileService(session).require_own_profile(user)
    document = await generate_provider_certificate(
        session, profile, template_id=template_id, format=format, user=user
    )
    return document_response(document, filename="provider-certificate")


@router.get("/visiting-vet/search")
async def search_visiting_vets(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None),
    animal_types: Optional[str] = Query(None, alias="animalTypes"),
    specialty_services: Optional[str] = Query(None, alias="specialtyServices"),
    location: Optional[str] = Query(None),
    service: ProfileService = Depends(get_profile_service),
):
    """Paginated search over provider profiles"""
    profiles, total = await service.search_profiles(
        page=page,
        limit=limit,
        search=search,
        animal_types=parse_csv_list(animal_types),
        specialty_services=parse_csv_list(specialty_services),
        location=location,
    )
    return envelope(
        serialize_many(ProfileResponse, profiles),
        count=len(profiles),
        pagination=PaginationInfo.build(page, limit, total).to_api(),
    )


@router.get("/visiting-vet")
async def list_visiting_vets(service: ProfileService = Depends(get_profile_service)):
    profiles = await service.list_profiles()
    return envelope(serialize_many(ProfileResponse, profiles), count=len(profiles))


@router.get("/visiting-vet/{user_id}")
async def get_visiting_vet(
    user_id: uuid.UUID,
    service: ProfileService = Depends(get_profile_service),
):
    """Public profile of a provider, looked up by the provider's user id"""
    profile, user = await service.get_public_profile(user_id)
    data = serialize(ProfileDetailResponse, profile)
    data["user"] = serialize(PublicUserInfo, user)
    return envelope(data)

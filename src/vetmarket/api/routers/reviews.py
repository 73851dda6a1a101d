"""Reviews router - submission, moderation and provider responses"""

import logging
import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ...models.user import User
from ...schemas.review import (
    ProviderResponseCreate,
    ReviewCreate,
    ReviewModeration,
    ReviewResponse,
    ReviewUpdate,
)
from ...services.profiles import PROFILE_NOT_FOUND
from ...services.reviews import ReviewService
from ..deps import (
    get_db_session,
    parse_public_id,
    protect,
    require_admin,
    require_pet_owner,
    require_provider,
)
from ..responses import envelope, serialize, serialize_many

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reviews", tags=["Reviews"])


def get_review_service(session: AsyncSession = Depends(get_db_session)) -> ReviewService:
    """Dependency injection for ReviewService"""
    return ReviewService(session)


@router.post("")
async def create_review(
    payload: ReviewCreate,
    user: User = Depends(require_pet_owner),
    service: ReviewService = Depends(get_review_service),
):
    """Review a completed appointment; the review starts out Pending"""
    review = await service.create_review(user, payload)
    return envelope(serialize(ReviewResponse, review), status_code=201)


@router.get("/me")
async def get_my_reviews(
    user: User = Depends(protect),
    service: ReviewService = Depends(get_review_service),
):
    reviews = await service.list_user_reviews(user)
    return envelope(serialize_many(ReviewResponse, reviews), count=len(reviews))


@router.get("/pending")
async def get_pending_reviews(
    admin: User = Depends(require_admin),
    service: ReviewService = Depends(get_review_service),
):
    reviews = await service.list_pending()
    return envelope(serialize_many(ReviewResponse, reviews), count=len(reviews))


@router.get("/provider/{profile_id}")
async def get_provider_reviews(
    profile_id: str,
    service: ReviewService = Depends(get_review_service),
):
    """Approved reviews of a provider, newest first"""
    profile_uuid = parse_public_id(profile_id, PROFILE_NOT_FOUND, "VisitingVetProfile")
    reviews = await service.list_provider_reviews(profile_uuid)
    return envelope(serialize_many(ReviewResponse, reviews), count=len(reviews))


@router.put("/{review_id}/moderate")
async def moderate_review(
    review_id: uuid.UUID,
    payload: ReviewModeration,
    admin: User = Depends(require_admin),
    service: ReviewService = Depends(get_review_service),
):
    review = await service.moderate_review(
        admin, review_id, payload.status, payload.moderator_notes
    )
    return envelope(serialize(ReviewResponse, review))


@router.post("/{review_id}/response")
async def respond_to_review(
    review_id: uuid.UUID,
    payload: ProviderResponseCreate,
    user: User = Depends(require_provider),
    service: ReviewService = Depends(get_review_service),
):
    review = await service.respond_to_review(user, review_id, payload.comment)
    return envelope(serialize(ReviewResponse, review))


@router.put("/{review_id}")
async def update_review(
    review_id: uuid.UUID,
    payload: ReviewUpdate,
    user: User = Depends(protect),
    service: ReviewService = Depends(get_review_service),
):
    review = await service.update_review(user, review_id, payload)
    return envelope(serialize(ReviewResponse, review))


@router.delete("/{review_id}")
async def delete_review(
    review_id: uuid.UUID,
    user: User = Depends(protect),
    service: ReviewService = Depends(get_review_service),
):
    await service.delete_review(user, review_id)
    return envelope(message="Review deleted successfully")

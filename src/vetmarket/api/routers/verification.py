"""Verification router - account verification requests"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ...models.user import User
from ...schemas.verification import VerificationRequestCreate, VerificationRequestResponse
from ...services.verification import VerificationService
from ..deps import get_db_session, protect, require_non_admin
from ..responses import envelope, serialize, serialize_many

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/verification", tags=["Verification"])


def get_verification_service(
    session: AsyncSession = Depends(get_db_session),
) -> VerificationService:
    """Dependency injection for VerificationService"""
    return VerificationService(session)


@router.post("/requests")
async def submit_verification_request(
    payload: VerificationRequestCreate,
    user: User = Depends(require_non_admin),
    service: VerificationService = Depends(get_verification_service),
):
    request = await service.submit_request(user, payload)
    return envelope(
        serialize(VerificationRequestResponse, request),
        message="Verification request submitted",
        status_code=201,
    )


@router.get("/requests/me")
async def get_my_verification_requests(
    user: User = Depends(protect),
    service: VerificationService = Depends(get_verification_service),
):
    requests = await service.list_user_requests(user)
    return envelope(
        serialize_many(VerificationRequestResponse, requests), count=len(requests)
    )

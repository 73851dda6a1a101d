"""
Account verification requests submitted by non-admin users.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ValidationException
from ..models.user import User, VerificationStatus
from ..models.verification import VerificationRequest, VerificationRequestStatus
from ..schemas.verification import VerificationRequestCreate

logger = logging.getLogger(__name__)


class VerificationService:
    """Business logic for submitting verification requests."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def submit_request(
        self, user: User, payload: VerificationRequestCreate
    ) -> VerificationRequest:
        """
        Submit documents for review and mark the account as pending.

        Raises:
            ValidationException: If the caller already has a pending request
        """
        pending = await self.session.scalar(
            select(VerificationRequest.id).where(
                VerificationRequest.user_id == user.id,
                VerificationRequest.status == VerificationRequestStatus.PENDING,
            )
        )
        if pending is not None:
            raise ValidationException("You already have a pending verification request")

        request = VerificationRequest(
            user_id=user.id,
            documents=[doc.model_dump() for doc in payload.documents],
            notes=payload.notes,
        )
        self.session.add(request)
        user.verification_status = VerificationStatus.PENDING
        await self.session.commit()

        logger.info(f"Verification request {request.id} submitted by {user.id}")
        return request

    async def list_user_requests(self, user: User) -> List[VerificationRequest]:
        result = await self.session.execute(
            select(VerificationRequest)
            .where(VerificationRequest.user_id == user.id)
            .order_by(VerificationRequest.created_at.desc())
        )
        return list(result.scalars().all())

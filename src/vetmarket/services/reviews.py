"""
Review submission, moderation and provider rating upkeep.

Only approved reviews count toward a provider's ``average_rating`` and
``number_of_reviews``; every change that can affect the approved set
recalculates both.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import AuthorizationException, NotFoundException, ValidationException
from ..models.appointment import Appointment
from ..models.profile import VisitingVetProfile
from ..models.review import ModerationStatus, Review
from ..models.user import User
from ..models.verification import AdminActionLog, AdminActionType
from ..schemas.review import ReviewCreate, ReviewUpdate
from .profiles import PROFILE_NOT_FOUND

logger = logging.getLogger(__name__)

REVIEW_NOT_FOUND = "Review not found"
MODERATION_DECISIONS = {
    ModerationStatus.APPROVED.value: ModerationStatus.APPROVED,
    ModerationStatus.REJECTED.value: ModerationStatus.REJECTED,
}


class ReviewService:
    """Business logic for reviews."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _require_review(self, review_id: uuid.UUID) -> Review:
        review = await self.session.get(Review, review_id)
        if review is None:
            raise NotFoundException(REVIEW_NOT_FOUND, resource="Review", resource_id=review_id)
        return review

    async def recalculate_provider_rating(self, profile_id: uuid.UUID) -> None:
        """
        Refresh a profile's rating summary from its approved reviews.

        The average is rounded to one decimal; no approved reviews gives 0.
        """
        row = (
            await self.session.execute(
                select(func.avg(Review.rating), func.count(Review.id)).where(
                    Review.provider_profile_id == profile_id,
                    Review.moderation_status == ModerationStatus.APPROVED,
                )
            )
        ).one()
        average, count = row

        profile = await self.session.get(VisitingVetProfile, profile_id)
        if profile is None:
            return
        profile.average_rating = round(float(average), 1) if count else 0.0
        profile.number_of_reviews = count
        logger.debug(
            f"Profile {profile_id} rating now {profile.average_rating} over {count} reviews"
        )

    async def create_review(self, user: User, payload: ReviewCreate) -> Review:
        """
        Submit a review for one of the caller's completed appointments.

        Raises:
            ValidationException: Missing fields, appointment not completed, or
                already reviewed
            NotFoundException: Unknown appointment
            AuthorizationException: Appointment belongs to someone else
        """
        if payload.appointment_id is None or payload.rating is None or not payload.comment:
            raise ValidationException("Please provide appointment ID, rating and comment")

        appointment = await self.session.get(Appointment, payload.appointment_id)
        if appointment is None:
            raise NotFoundException(
                "Appointment not found",
                resource="Appointment",
                resource_id=payload.appointment_id,
            )
        if appointment.pet_owner_id != user.id:
            raise AuthorizationException("Not authorized to review this appointment")
        if not appointment.is_completed:
            raise ValidationException(
                "Reviews can only be submitted for completed appointments"
            )

        existing = await self.session.scalar(
            select(Review.id).where(Review.appointment_id == appointment.id)
        )
        if existing is not None:
            raise ValidationException("A review already exists for this appointment")

        review = Review(
            rating=payload.rating,
            comment=payload.comment,
            reviewer_id=user.id,
            provider_profile_id=appointment.provider_profile_id,
            appointment_id=appointment.id,
        )
        self.session.add(review)
        await self.session.commit()

        logger.info(f"Review {review.id} submitted for appointment {appointment.id}")
        return review

    async def list_provider_reviews(self, profile_id: uuid.UUID) -> List[Review]:
        """Approved reviews of a provider, newest first."""
        if await self.session.get(VisitingVetProfile, profile_id) is None:
            raise NotFoundException(
                PROFILE_NOT_FOUND, resource="VisitingVetProfile", resource_id=profile_id
            )
        result = await self.session.execute(
            select(Review)
            .where(
                Review.provider_profile_id == profile_id,
                Review.moderation_status == ModerationStatus.APPROVED,
            )
            .order_by(Review.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_user_reviews(self, user: User) -> List[Review]:
        result = await self.session.execute(
            select(Review)
            .where(Review.reviewer_id == user.id)
            .order_by(Review.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_pending(self) -> List[Review]:
        """Moderation queue, oldest first."""
        result = await self.session.execute(
            select(Review)
            .where(Review.moderation_status == ModerationStatus.PENDING)
            .order_by(Review.created_at)
        )
        return list(result.scalars().all())

    async def moderate_review(
        self,
        admin: User,
        review_id: uuid.UUID,
        status: str,
        notes: Optional[str] = None,
    ) -> Review:
        """
        Approve or reject a review and refresh the provider's rating.

        Args:
            admin: Moderating administrator
            review_id: Review to moderate
            status: ``Approved`` or ``Rejected``
            notes: Optional moderator notes

        Raises:
            ValidationException: If the status is not a moderation decision
            NotFoundException: If the review does not exist
        """
        decision = MODERATION_DECISIONS.get(status)
        if decision is None:
            raise ValidationException(
                "Status must be Approved or Rejected", field="status", value=status
            )

        review = await self._require_review(review_id)
        review.moderate(decision, notes)
        await self.session.flush()
        await self.recalculate_provider_rating(review.provider_profile_id)

        self.session.add(
            AdminActionLog(
                admin_id=admin.id,
                action_type=AdminActionType.REVIEW_CONTENT,
                target_user_id=review.reviewer_id,
                details={"reviewId": str(review.id), "status": decision.value},
                reason=notes,
            )
        )
        await self.session.commit()

        logger.info(f"Review {review.id} moderated as {decision.value} by {admin.id}")
        return review

    async def respond_to_review(
        self, user: User, review_id: uuid.UUID, comment: str
    ) -> Review:
        """
        Attach the provider's public response to an approved review.

        Raises:
            NotFoundException: If the review does not exist
            AuthorizationException: If the caller does not own the reviewed profile
            ValidationException: If the review is not approved
        """
        review = await self._require_review(review_id)

        profile_id = await self.session.scalar(
            select(VisitingVetProfile.id).where(VisitingVetProfile.user_id == user.id)
        )
        if profile_id is None or profile_id != review.provider_profile_id:
            raise AuthorizationException("Not authorized to respond to this review")
        if not review.is_approved:
            raise ValidationException("Only approved reviews can receive a response")

        review.respond(comment)
        await self.session.commit()
        return review

    async def update_review(
        self, user: User, review_id: uuid.UUID, payload: ReviewUpdate
    ) -> Review:
        """
        Edit the caller's review; it goes back into the moderation queue.

        Raises:
            NotFoundException: If the review does not exist
            AuthorizationException: If the caller did not write it
        """
        review = await self._require_review(review_id)
        if review.reviewer_id != user.id:
            raise AuthorizationException("Not authorized to update this review")

        updates = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
        review.update_fields(**updates)
        review.moderate(ModerationStatus.PENDING)
        await self.session.flush()
        await self.recalculate_provider_rating(review.provider_profile_id)

        await self.session.commit()
        return review

    async def delete_review(self, user: User, review_id: uuid.UUID) -> None:
        """
        Delete a review (its author or an admin).

        Raises:
            NotFoundException: If the review does not exist
            AuthorizationException: If the caller is neither author nor admin
        """
        review = await self._require_review(review_id)
        if review.reviewer_id != user.id and not user.is_admin:
            raise AuthorizationException("Not authorized to delete this review")

        profile_id, reviewer_id = review.provider_profile_id, review.reviewer_id
        await self.session.delete(review)
        await self.session.flush()
        await self.recalculate_provider_rating(profile_id)

        if user.is_admin and reviewer_id != user.id:
            self.session.add(
                AdminActionLog(
                    admin_id=user.id,
                    action_type=AdminActionType.DELETE_CONTENT,
                    target_user_id=reviewer_id,
                    details={"reviewId": str(review_id)},
                )
            )
        await self.session.commit()
        logger.info(f"Review {review_id} deleted by {user.id}")

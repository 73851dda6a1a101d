"""
Administrative operations on accounts, verification requests and provider
DORA status.

Every mutation here writes an ``AdminActionLog`` entry in the same
transaction as the change it records.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import (
    AuthorizationException,
    NotFoundException,
    ValidationException,
    VetMarketException,
)
from ..models.profile import DoraStatus, VisitingVetProfile
from ..models.user import User, UserRole, VerificationStatus
from ..models.verification import (
    AdminActionLog,
    AdminActionType,
    VerificationRequest,
    VerificationRequestStatus,
)
from ..utils.datetime_utils import get_current_utc, parse_iso_datetime

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"
REQUEST_NOT_FOUND = "Verification request not found"


class AdminService:
    """Business logic behind the admin endpoints."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _log_action(
        self,
        admin: User,
        action_type: AdminActionType,
        target_user_id: Optional[uuid.UUID] = None,
        details: Optional[Dict[str, Any]] = None,
        reason: Optional[str] = None,
    ) -> AdminActionLog:
        entry = AdminActionLog(
            admin_id=admin.id,
            action_type=action_type,
            target_user_id=target_user_id,
            details=details,
            reason=reason,
        )
        self.session.add(entry)
        logger.info(
            f"Admin {admin.id} performed {action_type.value} on {target_user_id or '-'}"
        )
        return entry

    async def _require_user(self, user_id: uuid.UUID) -> User:
        user = await self.session.get(User, user_id)
        if user is None:
            raise NotFoundException(USER_NOT_FOUND, resource="User", resource_id=user_id)
        return user

    # Users

    async def list_users(
        self,
        page: int = 1,
        limit: int = 25,
        role: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[User], int]:
        """
        Paginated user list, newest first.

        Args:
            page: 1-based page number
            limit: Page size
            role: Role value or display name to filter by
            search: Case-insensitive match on name or email

        Raises:
            ValidationException: If the role is unknown
        """
        query = select(User)
        if role:
            try:
                query = query.where(User.role == UserRole.normalize(role))
            except ValueError:
                raise ValidationException(f"Invalid role: {role}", field="role", value=role)
        if search:
            term = search.strip()
            query = query.where(
                or_(
                    User.name.icontains(term, autoescape=True),
                    User.email.icontains(term, autoescape=True),
                )
            )

        total = await self.session.scalar(select(func.count()).select_from(query.subquery()))
        result = await self.session.execute(
            query.order_by(User.created_at.desc()).offset((page - 1) * limit).limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def get_user_details(
        self, user_id: uuid.UUID
    ) -> Tuple[User, Optional[VisitingVetProfile]]:
        """A user and, for providers, their profile."""
        user = await self._require_user(user_id)
        profile = None
        if user.is_provider:
            result = await self.session.execute(
                select(VisitingVetProfile).where(VisitingVetProfile.user_id == user.id)
            )
            profile = result.scalar_one_or_none()
        return user, profile

    async def ban_user(
        self, admin: User, user_id: uuid.UUID, reason: Optional[str] = None
    ) -> User:
        """
        Ban an account.

        Raises:
            NotFoundException: If the user does not exist
            AuthorizationException: If the target is an admin
        """
        user = await self._require_user(user_id)
        if user.is_admin:
            raise AuthorizationException("Cannot ban an admin user")

        user.ban(reason)
        self._log_action(admin, AdminActionType.BAN_USER, user.id, reason=reason)
        await self.session.commit()
        return user

    async def unban_user(self, admin: User, user_id: uuid.UUID) -> User:
        user = await self._require_user(user_id)
        user.unban()
        self._log_action(admin, AdminActionType.UNBAN_USER, user.id)
        await self.session.commit()
        return user

    async def verify_user(self, admin: User, user_id: uuid.UUID) -> User:
        """Mark an account verified without a verification request."""
        user = await self._require_user(user_id)
        user.mark_verified()
        self._log_action(
            admin, AdminActionType.VERIFY_USER, user.id, reason="Manual verification by admin"
        )
        await self.session.commit()
        return user

    # Verification requests

    async def list_pending_verifications(self) -> List[VerificationRequest]:
        """Pending verification requests, oldest first."""
        result = await self.session.execute(
            select(VerificationRequest)
            .where(VerificationRequest.status == VerificationRequestStatus.PENDING)
            .order_by(VerificationRequest.created_at)
        )
        return list(result.scalars().all())

    async def _require_pending_request(self, request_id: uuid.UUID) -> VerificationRequest:
        request = await self.session.get(VerificationRequest, request_id)
        if request is None:
            raise NotFoundException(
                REQUEST_NOT_FOUND, resource="VerificationRequest", resource_id=request_id
            )
        if not request.is_pending:
            raise ValidationException(
                f"Verification request has already been {request.status.value.lower()}"
            )
        return request

    async def _approve(self, admin: User, request_id: uuid.UUID) -> VerificationRequest:
        request = await self._require_pending_request(request_id)
        user = await self._require_user(request.user_id)

        request.approve(admin.id)
        user.mark_verified()
        self._log_action(
            admin,
            AdminActionType.VERIFY_USER,
            user.id,
            details={"requestId": str(request.id)},
        )
        return request

    async def _reject(
        self, admin: User, request_id: uuid.UUID, reason: Optional[str]
    ) -> VerificationRequest:
        request = await self._require_pending_request(request_id)
        user = await self._require_user(request.user_id)

        request.reject(admin.id, reason)
        user.is_verified = False
        user.verification_status = VerificationStatus.REJECTED
        self._log_action(
            admin,
            AdminActionType.REJECT_VERIFICATION,
            user.id,
            details={"requestId": str(request.id)},
            reason=reason,
        )
        return request

    async def approve_verification(
        self, admin: User, request_id: uuid.UUID
    ) -> VerificationRequest:
        """
        Approve a pending request and verify its account.

        Raises:
            NotFoundException: If the request does not exist
            ValidationException: If the request is no longer pending
        """
        request = await self._approve(admin, request_id)
        await self.session.commit()
        return request

    async def reject_verification(
        self, admin: User, request_id: uuid.UUID, reason: Optional[str] = None
    ) -> VerificationRequest:
        """
        Reject a pending request.

        Raises:
            NotFoundException: If the request does not exist
            ValidationException: If the request is no longer pending
        """
        request = await self._reject(admin, request_id, reason)
        await self.session.commit()
        return request

    async def bulk_verification_action(
        self,
        admin: User,
        action: str,
        request_ids: List[uuid.UUID],
        reason: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Approve or reject several verification requests.

        Each request is processed on its own: one failing (unknown id, already
        processed) does not stop the others. All successful changes are
        committed together.

        Args:
            admin: Acting administrator
            action: ``approve`` or ``reject``
            request_ids: Requests to process, in order
            reason: Rejection reason applied to every rejected request

        Returns:
            Dict with ``action``, ``processed``, ``succeeded``, ``failed`` and
            per-item ``results`` of ``request_id``/``success``/``message``
        """
        if action not in ("approve", "reject"):
            raise ValidationException(
                "Action must be approve or reject", field="action", value=action
            )

        results = []
        for request_id in dict.fromkeys(request_ids):
            try:
                if action == "approve":
                    await self._approve(admin, request_id)
                    message = "Verification request approved"
                else:
                    await self._reject(admin, request_id, reason)
                    message = "Verification request rejected"
                results.append({"request_id": request_id, "success": True, "message": message})
            except VetMarketException as e:
                logger.warning(f"Bulk {action} skipped request {request_id}: {e.message}")
                results.append(
                    {"request_id": request_id, "success": False, "message": e.message}
                )

        await self.session.commit()

        succeeded = sum(1 for item in results if item["success"])
        logger.info(
            f"Bulk {action} by admin {admin.id}: {succeeded}/{len(results)} succeeded"
        )
        return {
            "action": action,
            "processed": len(results),
            "succeeded": succeeded,
            "failed": len(results) - succeeded,
            "results": results,
        }

    # Audit log

    async def list_action_logs(
        self, page: int = 1, limit: int = 25, action_type: Optional[str] = None
    ) -> Tuple[List[AdminActionLog], int]:
        """
        Paginated audit log, newest first.

        Raises:
            ValidationException: If the action type is unknown
        """
        query = select(AdminActionLog)
        if action_type:
            try:
                query = query.where(AdminActionLog.action_type == AdminActionType(action_type))
            except ValueError:
                raise ValidationException(
                    f"Invalid action type: {action_type}",
                    field="actionType",
                    value=action_type,
                )

        total = await self.session.scalar(select(func.count()).select_from(query.subquery()))
        result = await self.session.execute(
            query.order_by(AdminActionLog.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    # DORA

    async def record_manual_dora_check(
        self,
        admin: User,
        provider_id: uuid.UUID,
        status: Optional[str],
        checked_at: Optional[str] = None,
    ) -> VisitingVetProfile:
        """
        Record the outcome of a manual DORA licence check for a provider.

        Args:
            admin: Administrator who performed the check
            provider_id: Provider's user id (a profile id is also accepted)
            status: One of the DORA status values
            checked_at: ISO-8601 time of the check; defaults to now

        Raises:
            ValidationException: Unknown status or unparseable date
            NotFoundException: No matching provider profile
        """
        try:
            dora_status = DoraStatus(status)
        except ValueError:
            raise ValidationException(
                "Invalid verification status.",
                field="status",
                value=status,
                validation_errors={"allowed": [s.value for s in DoraStatus]},
            )

        if checked_at:
            try:
                checked = parse_iso_datetime(checked_at)
            except ValueError:
                raise ValidationException(
                    "Invalid verification date format.", field="date", value=checked_at
                )
        else:
            checked = get_current_utc()

        result = await self.session.execute(
            select(VisitingVetProfile).where(VisitingVetProfile.user_id == provider_id)
        )
        profile = result.scalar_one_or_none()
        if profile is None:
            profile = await self.session.get(VisitingVetProfile, provider_id)
        if profile is None:
            logger.warning(f"Provider not found for manual verification update: {provider_id}")
            raise NotFoundException(
                "Provider not found.", resource="VisitingVetProfile", resource_id=provider_id
            )

        profile.record_dora_check(dora_status, checked, admin.id)
        self._log_action(
            admin,
            AdminActionType.MANUAL_DORA_CHECK,
            profile.user_id,
            details={
                "profileId": str(profile.id),
                "status": dora_status.value,
                "lastChecked": checked.isoformat(),
            },
        )
        await self.session.commit()

        logger.info(
            f"Manual DORA verification for profile {profile.id} set to {dora_status.value}"
        )
        return profile

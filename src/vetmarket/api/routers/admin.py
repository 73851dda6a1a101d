"""
Admin router - user management, verification review, audit log, manual DORA
checks and document templates. Every route requires the Admin role.
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...models.user import User
from ...schemas.common import PaginationInfo
from ...schemas.profile import ProfileResponse
from ...schemas.template import TemplateCreate, TemplateResponse
from ...schemas.user import BanRequest, UserResponse
from ...schemas.verification import (
    AdminActionLogResponse,
    BulkVerificationRequest,
    BulkVerificationResult,
    ManualVerificationRequest,
    RejectionRequest,
    VerificationRequestResponse,
)
from ...services.admin import AdminService
from ...services.templates import TemplateService
from ..deps import get_db_session, require_admin
from ..responses import envelope, serialize, serialize_many

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


def get_admin_service(session: AsyncSession = Depends(get_db_session)) -> AdminService:
    """Dependency injection for AdminService"""
    return AdminService(session)


# Users


@router.get("/users")
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(25, ge=1, le=100),
    role: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    users, total = await service.list_users(page=page, limit=limit, role=role, search=search)
    return envelope(
        serialize_many(UserResponse, users),
        count=len(users),
        pagination=PaginationInfo.build(page, limit, total).to_api(),
    )


@router.get("/users/{user_id}")
async def get_user_details(
    user_id: uuid.UUID,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    user, profile = await service.get_user_details(user_id)
    return envelope(
        {
            "user": serialize(UserResponse, user),
            "profile": serialize(ProfileResponse, profile) if profile else None,
        }
    )


@router.put("/users/{user_id}/ban")
async def ban_user(
    user_id: uuid.UUID,
    payload: Optional[BanRequest] = None,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    reason = payload.reason if payload else None
    user = await service.ban_user(admin, user_id, reason)
    return envelope(serialize(UserResponse, user), message="User banned successfully")


@router.put("/users/{user_id}/unban")
async def unban_user(
    user_id: uuid.UUID,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    user = await service.unban_user(admin, user_id)
    return envelope(serialize(UserResponse, user), message="User unbanned successfully")


@router.put("/users/{user_id}/verify")
async def verify_user(
    user_id: uuid.UUID,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    user = await service.verify_user(admin, user_id)
    return envelope(serialize(UserResponse, user), message="User verified successfully")


# Verification requests


@router.get("/verifications/pending")
async def list_pending_verifications(
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    requests = await service.list_pending_verifications()
    return envelope(
        serialize_many(VerificationRequestResponse, requests), count=len(requests)
    )


@router.post("/verifications/bulk")
async def bulk_verification_action(
    payload: BulkVerificationRequest,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    """Approve or reject several requests; failures are reported per item"""
    outcome = await service.bulk_verification_action(
        admin, payload.action, payload.request_ids, payload.reason
    )
    result = BulkVerificationResult.model_validate(outcome)
    return envelope(
        result.to_api(),
        message=f"Processed {result.processed} verification requests",
    )


@router.put("/verifications/{request_id}/approve")
async def approve_verification(
    request_id: uuid.UUID,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    request = await service.approve_verification(admin, request_id)
    return envelope(
        serialize(VerificationRequestResponse, request),
        message="Verification request approved",
    )


@router.put("/verifications/{request_id}/reject")
async def reject_verification(
    request_id: uuid.UUID,
    payload: Optional[RejectionRequest] = None,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    reason = payload.reason if payload else None
    request = await service.reject_verification(admin, request_id, reason)
    return envelope(
        serialize(VerificationRequestResponse, request),
        message="Verification request rejected",
    )


# Audit log


@router.get("/action-logs")
async def list_action_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(25, ge=1, le=100),
    action_type: Optional[str] = Query(None, alias="actionType"),
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    logs, total = await service.list_action_logs(page=page, limit=limit, action_type=action_type)
    return envelope(
        serialize_many(AdminActionLogResponse, logs),
        count=len(logs),
        pagination=PaginationInfo.build(page, limit, total).to_api(),
    )


# DORA


@router.put("/providers/{provider_id}/manual-verification")
async def manual_dora_verification(
    provider_id: uuid.UUID,
    payload: ManualVerificationRequest,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    """Record a manual DORA licence check for a provider (user id or profile id)"""
    profile = await service.record_manual_dora_check(
        admin, provider_id, payload.status, payload.date
    )
    return envelope(
        serialize(ProfileResponse, profile),
        message="Provider verification status updated successfully.",
    )


# Templates


@router.post("/templates")
async def create_template(
    payload: TemplateCreate,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    template = await TemplateService(session).create_template(admin, payload)
    return envelope(serialize(TemplateResponse, template), status_code=201)


@router.get("/templates")
async def list_templates(
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    templates = await TemplateService(session).list_templates()
    return envelope(serialize_many(TemplateResponse, templates), count=len(templates))

"""
FastAPI dependencies: database sessions, settings and bearer-token auth.

``protect`` resolves the bearer token to an active account; ``authorize``
narrows a route to a set of roles on top of it.
"""

import logging
import uuid
from typing import AsyncGenerator, Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.session import SessionManager
from ..exceptions import AuthorizationException, NotFoundException
from ..models.user import User, UserRole
from ..services.auth import AuthService
from ..utils.config import AppSettings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a session from the application's ``SessionManager``."""
    manager: SessionManager = request.app.state.session_manager
    async with manager.get_session() as session:
        yield session


async def protect(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_db_session),
    settings: AppSettings = Depends(get_settings),
) -> User:
    """
    Require a valid bearer token and return the authenticated user.

    Raises:
        AuthenticationException: Missing/invalid token or unknown user (401)
        TokenExpiredException: Expired token (401)
        SessionTimeoutException: Idle session (401)
        AuthorizationException: Banned account (403)
    """
    token = credentials.credentials if credentials else None
    return await AuthService(session, settings).resolve_token(token)


def authorize(*roles: UserRole) -> Callable[..., User]:
    """
    Build a dependency admitting only users holding one of ``roles``.

    Example:
        @router.get("/pending", dependencies=[Depends(authorize(UserRole.ADMIN))])
    """

    async def role_checker(user: User = Depends(protect)) -> User:
        if not user.has_role(*roles):
            logger.warning(f"User {user.id} with role {user.role.value} denied access")
            raise AuthorizationException(
                f"User role {user.role.value} is not authorized to access this route",
                required_roles=[role.value for role in roles],
            )
        return user

    return role_checker


# Shared instances so FastAPI caches them per request
require_admin = authorize(UserRole.ADMIN)
require_provider = authorize(UserRole.MVS_PROVIDER)
require_pet_owner = authorize(UserRole.PET_OWNER)
require_non_admin = authorize(UserRole.PET_OWNER, UserRole.MVS_PROVIDER, UserRole.CLINIC)


def parse_public_id(value: str, message: str, resource: str) -> uuid.UUID:
    """
    Parse an id taken from a public URL.

    Ids that are not UUIDs cannot name any row, so they are reported as
    missing rather than as a malformed request.

    Raises:
        NotFoundException: If ``value`` is not a UUID
    """
    try:
        return uuid.UUID(value)
    except ValueError:
        raise NotFoundException(message, resource=resource, resource_id=value)

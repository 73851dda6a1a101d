"""Auth router - registration, login and the current account"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ...models.user import User
from ...schemas.user import UserLogin, UserRegister, UserResponse
from ...services.auth import AuthService
from ...utils.config import AppSettings
from ..deps import get_db_session, get_settings, protect
from ..responses import envelope, serialize

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def get_auth_service(
    session: AsyncSession = Depends(get_db_session),
    settings: AppSettings = Depends(get_settings),
) -> AuthService:
    """Dependency injection for AuthService"""
    return AuthService(session, settings)


@router.post("/register")
async def register(payload: UserRegister, service: AuthService = Depends(get_auth_service)):
    """Create an account; display role names such as 'Mobile Vet Provider' are accepted"""
    user, token = await service.register(payload)
    return envelope(
        {"token": token, "user": serialize(UserResponse, user)},
        message="User registered successfully",
        status_code=201,
    )


@router.post("/login")
async def login(payload: UserLogin, service: AuthService = Depends(get_auth_service)):
    user, token = await service.login(payload)
    return envelope({"token": token, "user": serialize(UserResponse, user)})


@router.get("/me")
async def get_me(user: User = Depends(protect)):
    """Return the authenticated account"""
    return envelope(serialize(UserResponse, user))

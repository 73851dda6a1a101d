"""
Account registration, login and bearer-token resolution.
"""

import logging
import uuid
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import (
    AuthenticationException,
    AuthorizationException,
    SessionTimeoutException,
    ValidationException,
)
from ..models.user import User, UserRole
from ..schemas.user import UserLogin, UserRegister
from ..utils.config import AppSettings
from ..utils.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from ..utils.validation import validate_email

logger = logging.getLogger(__name__)


class AuthService:
    """Business logic for accounts and authentication."""

    def __init__(self, session: AsyncSession, settings: AppSettings):
        self.session = session
        self.settings = settings

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    def issue_token(self, user: User) -> str:
        """Create an access token for ``user``."""
        return create_access_token(
            user.id,
            self.settings.jwt_secret,
            algorithm=self.settings.jwt_algorithm,
            expires_minutes=self.settings.jwt_expires_minutes,
            extra_claims={"role": user.role.value},
        )

    async def register(self, payload: UserRegister) -> Tuple[User, str]:
        """
        Create an account and return it with a fresh token.

        Args:
            payload: Registration data; role may be a display name

        Returns:
            Tuple of the new user and its access token

        Raises:
            ValidationException: On missing fields, a bad email or role, or a
                duplicate account
        """
        if not payload.email or not payload.password or not payload.role:
            raise ValidationException("Please provide email, password and role")

        email_result = validate_email(payload.email)
        if not email_result.is_valid:
            raise ValidationException(
                email_result.errors[0].message, field="email", value=payload.email
            )

        try:
            role = UserRole.normalize(payload.role)
        except ValueError:
            raise ValidationException(
                f"Invalid role: {payload.role}", field="role", value=payload.role
            )
        if role == UserRole.ADMIN:
            raise ValidationException(
                "Admin accounts cannot be self-registered", field="role"
            )

        if await self.get_user_by_email(email_result.value) is not None:
            raise ValidationException("User already exists", field="email")

        user = User(
            email=email_result.value,
            password_hash=hash_password(payload.password),
            name=payload.name,
            phone_number=payload.phone_number,
            role=role,
        )
        user.touch()
        self.session.add(user)
        await self.session.commit()

        logger.info(f"Registered user {user.id} with role {role.value}")
        return user, self.issue_token(user)

    async def login(self, payload: UserLogin) -> Tuple[User, str]:
        """
        Check credentials and return the user with a fresh token.

        Raises:
            AuthenticationException: If the email or password is wrong
            AuthorizationException: If the account is banned
        """
        user = await self.get_user_by_email(payload.email)
        if user is None or not verify_password(payload.password, user.password_hash):
            logger.warning(f"Failed login attempt for {payload.email}")
            raise AuthenticationException("Invalid credentials")
        if user.is_banned:
            raise AuthorizationException("Account is banned")

        user.touch()
        await self.session.commit()
        return user, self.issue_token(user)

    async def resolve_token(self, token: Optional[str]) -> User:
        """
        Resolve a bearer token to an active account and record the activity.

        Raises:
            AuthenticationException: Missing or invalid token, unknown user
            TokenExpiredException: Expired token
            AuthorizationException: Banned account
            SessionTimeoutException: Idle longer than the account's timeout
        """
        if not token:
            raise AuthenticationException("Not authorized, no token")

        user_id: uuid.UUID = decode_access_token(
            token, self.settings.jwt_secret, self.settings.jwt_algorithm
        )
        user = await self.session.get(User, user_id)
        if user is None:
            raise AuthenticationException("Not authorized, user not found")
        if user.is_banned:
            raise AuthorizationException("Account is banned")
        if self.settings.session_timeout_enforced and user.session_expired():
            logger.info(f"Session timed out for user {user.id}")
            raise SessionTimeoutException(
                timeout_minutes=user.session_timeout_minutes
            )

        user.touch()
        await self.session.commit()
        return user

    async def create_admin(
        self, email: str, password: str, name: Optional[str] = None
    ) -> User:
        """
        Create an administrator account, or promote an existing one.

        Used by the ``create-admin`` console command.
        """
        email_result = validate_email(email)
        if not email_result.is_valid:
            raise ValidationException(email_result.errors[0].message, field="email")

        user = await self.get_user_by_email(email_result.value)
        if user is None:
            user = User(
                email=email_result.value,
                password_hash=hash_password(password),
                name=name or "Administrator",
                role=UserRole.ADMIN,
            )
            self.session.add(user)
        else:
            user.role = UserRole.ADMIN
            user.password_hash = hash_password(password)
        user.mark_verified()

        await self.session.commit()
        logger.info(f"Admin account ready: {user.email}")
        return user

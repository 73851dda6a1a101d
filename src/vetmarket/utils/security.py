"""
Password hashing and bearer-token helpers.

Passwords are hashed with bcrypt through passlib; access tokens are HS256
JWTs (python-jose) whose ``sub`` claim is the user id.
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from ..exceptions import AuthenticationException, TokenExpiredException
from .datetime_utils import get_current_utc

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a plain-text password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Check a plain-text password against a stored bcrypt hash."""
    if not password_hash:
        return False
    return pwd_context.verify(plain_password, password_hash)


def create_access_token(
    user_id: uuid.UUID,
    secret: str,
    algorithm: str = "HS256",
    expires_minutes: int = 60,
    now: Optional[datetime] = None,
    extra_claims: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Create a signed access token for a user.

    Args:
        user_id: Id of the authenticated user (stored as ``sub``)
        secret: Signing secret
        algorithm: JWT algorithm
        expires_minutes: Token lifetime in minutes
        now: Issue time override (mainly for tests)
        extra_claims: Additional claims to embed, e.g. the role

    Returns:
        Encoded JWT string
    """
    issued_at = now or get_current_utc()
    claims: Dict[str, Any] = {
        "sub": str(user_id),
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + timedelta(minutes=expires_minutes)).timestamp()),
    }
    if extra_claims:
        claims.update(extra_claims)
    return jwt.encode(claims, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str, algorithm: str = "HS256") -> uuid.UUID:
    """
    Verify a token and return the user id it was issued for.

    Raises:
        TokenExpiredException: If the token is past its expiry
        AuthenticationException: If the token is malformed or badly signed
    """
    try:
        claims = jwt.decode(token, secret, algorithms=[algorithm])
    except ExpiredSignatureError:
        raise TokenExpiredException()
    except JWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise AuthenticationException("Not authorized, token failed")

    subject = claims.get("sub")
    try:
        return uuid.UUID(str(subject))
    except ValueError:
        raise AuthenticationException("Not authorized, token failed")

"""
core/security.py

Handles password hashing and session token logic:
- Password verification and hashing (bcrypt via passlib)
- Creating and decoding signed session tokens (JWT via python-jose)
- Cookie parameters for the session token
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, cast
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

from softwarepros.core.config import settings

logger = logging.getLogger(__name__)

# Password hashing configuration
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ------------------------------------------------
# Password Utilities
# ------------------------------------------------
def get_password_hash(password: str) -> str:
    """Hashes a plain text password."""
    return cast(str, pwd_context.hash(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifies a plain text password against a hash."""
    return cast(bool, pwd_context.verify(plain_password, hashed_password))


# ------------------------------------------------
# Session Tokens
# ------------------------------------------------
def create_session_token(user_id: UUID | str, expires_delta: timedelta | None = None) -> str:
    """
    Create a signed session token bound to a user id.

    Args:
        user_id (UUID | str): The user ID to include as the subject.
        expires_delta (timedelta | None): Lifetime, defaults to the cookie max age.

    Returns:
        str: Encoded JWT.
    """
    issued_at = datetime.now(timezone.utc)
    expire = issued_at + (expires_delta or timedelta(seconds=settings.SESSION_MAX_AGE_SECONDS))
    payload: dict[str, Any] = {"sub": str(user_id), "iat": issued_at, "exp": expire}

    logger.info(f"Issuing session token for sub={user_id} exp={expire}")
    return str(jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM))


def decode_session_token(token: str) -> dict[str, Any] | None:
    """Returns the token payload, or None when the token is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.debug(f"[AUTH] Session token rejected: {e}")
        return None
    if not payload.get("sub"):
        return None
    return cast(dict[str, Any], payload)


def session_cookie_params() -> dict[str, Any]:
    """Attributes for the session cookie set after a successful login."""
    return {
        "key": settings.SESSION_COOKIE_NAME,
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "strict",
        "max_age": settings.SESSION_MAX_AGE_SECONDS,
        "path": "/",
    }

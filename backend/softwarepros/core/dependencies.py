"""
backend/softwarepros/core/dependencies.py

Authentication and Authorization Dependencies

Provides authentication and role-based access control for FastAPI routes:
- Validates session tokens from the HttpOnly cookie or a Bearer header
- Retrieves the authenticated user from the database
- Restricts blog management to admins
- Exposes the contact-form rate limiter owned by the application
"""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from softwarepros.core.config import settings
from softwarepros.core.rate_limiter import RateLimiter
from softwarepros.core.security import decode_session_token
from softwarepros.database.enums import UserRole
from softwarepros.database.models import User
from softwarepros.database.session import get_db

# ---------------------------------------------------
# Logger Configuration
# ---------------------------------------------------
logger = logging.getLogger(__name__)

# ---------------------------------------------------
# OAuth2 Configuration
# ---------------------------------------------------
# auto_error=False so a missing header falls through to the cookie check
oauth2_scheme: OAuth2PasswordBearer = OAuth2PasswordBearer(
    tokenUrl="/api/auth/login", auto_error=False
)


def _unauthorized() -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


# ---------------------------------------------------
# Authentication Functions
# ---------------------------------------------------
async def get_current_user(
    request: Request,
    token_header: Annotated[str | None, Depends(oauth2_scheme)] = None,
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Authenticate the current user from the session cookie,
    falling back to an Authorization Bearer header.

    Raises:
        HTTPException: 401 Unauthorized if authentication fails.
    """
    token = request.cookies.get(settings.SESSION_COOKIE_NAME) or token_header
    if not token:
        logger.debug("[AUTH] No session cookie or Authorization header present.")
        raise _unauthorized()

    payload = decode_session_token(token)
    if payload is None:
        raise _unauthorized()

    try:
        user_id = UUID(payload["sub"])
    except ValueError:
        raise _unauthorized()

    try:
        result = await db.execute(select(User).filter(User.id == user_id))
        user = result.unique().scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"[AUTH] Database error while loading user {payload['sub']}: {e}")
        raise _unauthorized()

    if not user:
        logger.warning(f"[AUTH] Token valid but no matching user found: user_id={payload['sub']}")
        raise _unauthorized()

    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Restricts access to admin accounts."""
    if user.role != UserRole.ADMIN:
        logger.warning(f"[RBAC] Access denied: User {user.id} role={user.role}, required=ADMIN")
        raise _unauthorized()
    return user


# ---------------------------------------------------
# Application-Owned Resources
# ---------------------------------------------------
def get_contact_rate_limiter(request: Request) -> RateLimiter:
    """Returns the limiter guarding contact-form email sends."""
    return request.app.state.contact_rate_limiter

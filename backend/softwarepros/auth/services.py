"""
auth/services.py

Handles authentication-related business logic:
- Credential lookup through a pluggable credential store
- Password verification and session token issuance
- Mapping every failure to a coarse login denial reason

Unknown emails and wrong passwords fail with the same error and message
so that responses never reveal whether an account exists.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from softwarepros.auth.schemas import LoginRequest
from softwarepros.core.exceptions import (
    AuthError,
    BadRequestError,
    InternalError,
    InvalidCredentialsError,
    ServiceUnavailableError,
)
from softwarepros.core.security import create_session_token, verify_password
from softwarepros.database.models import User

logger = logging.getLogger(__name__)


# ------------------------------------------------
# Credential Store
# ------------------------------------------------
class CredentialStoreUnavailable(Exception):
    """Raised by a credential store when its backend cannot be reached."""


class CredentialStore(Protocol):
    async def find_by_email(self, email: str) -> User | None: ...


class SQLAlchemyCredentialStore:
    """Reads credential records from the users table."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_by_email(self, email: str) -> User | None:
        try:
            result = await self.db.execute(select(User).filter(User.email == email))
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"[LOGIN] Credential lookup failed: {e}")
            raise CredentialStoreUnavailable(str(e)) from e
        return result.unique().scalar_one_or_none()


# ------------------------------------------------
# Login
# ------------------------------------------------
@dataclass(frozen=True)
class LoginResult:
    session_token: str
    user: User


class LoginAuthenticator:
    """
    Verifies an email/password pair and issues a session token.

    Args:
        store (CredentialStore): Looks up users by email.
        verify (Callable[[str, str], bool]): One-way password verification.
        issue (Callable[[UUID], str]): Builds the session token for a user id.
    """

    def __init__(
        self,
        store: CredentialStore,
        verify: Callable[[str, str], bool] = verify_password,
        issue: Callable[[UUID], str] = create_session_token,
    ) -> None:
        self.store = store
        self._verify = verify
        self._issue = issue

    async def login(self, email: str | None, password: str | None) -> LoginResult:
        """
        Authenticates the user.

        Raises:
            BadRequestError: email or password missing.
            InvalidCredentialsError: unknown email or wrong password.
            ServiceUnavailableError: the credential store is unreachable.
            InternalError: anything unexpected.
        """
        try:
            return await self._authenticate(email, password)
        except AuthError:
            raise
        except Exception:
            logger.exception("[LOGIN] Unexpected error during login")
            raise InternalError()

    async def _authenticate(self, email: str | None, password: str | None) -> LoginResult:
        email = (email or "").strip()
        if not email or not password:
            raise BadRequestError()

        try:
            user = await self.store.find_by_email(email)
        except CredentialStoreUnavailable:
            raise ServiceUnavailableError()

        if user is None:
            logger.warning(f"[LOGIN] Failed login attempt for email: {email}")
            raise InvalidCredentialsError()

        if not self._verify(password, user.hashed_password):
            logger.warning(f"[LOGIN] Failed login attempt for email: {email}")
            raise InvalidCredentialsError()

        token = self._issue(user.id)
        return LoginResult(session_token=token, user=user)


async def login_user(payload: LoginRequest, db: AsyncSession, client_ip: str) -> LoginResult:
    """Authenticates a user via JSON email/password against the database."""
    authenticator = LoginAuthenticator(SQLAlchemyCredentialStore(db))
    result = await authenticator.login(payload.email, payload.password)
    logger.info(f"[LOGIN] User logged in successfully: {result.user.email} from IP: {client_ip}")
    return result

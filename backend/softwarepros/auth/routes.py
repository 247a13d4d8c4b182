"""
auth/routes.py

Handles authentication routes including:
- Email/password login issuing an HttpOnly session cookie
- Logout clearing the session cookie
- Current user lookup
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from softwarepros.auth.schemas import AuthUserResponse, LoginRequest, LoginResponse, LogoutResponse
from softwarepros.auth.services import login_user
from softwarepros.core.config import settings
from softwarepros.core.dependencies import get_current_user
from softwarepros.core.exceptions import BadRequestError
from softwarepros.core.limiter import limiter
from softwarepros.core.security import session_cookie_params
from softwarepros.database.models import User
from softwarepros.database.session import get_db

# ---------------------------------------------------
# Router Configuration
# ---------------------------------------------------
router = APIRouter(prefix="/api/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)

DBDep = Annotated[AsyncSession, Depends(get_db)]


async def read_login_payload(request: Request) -> LoginRequest:
    """
    Parses the login body by hand so that unreadable JSON, a non-object
    body or wrongly typed fields answer 400 like missing credentials.
    """
    try:
        data = await request.json()
    except ValueError:
        logger.warning("[LOGIN] Rejected unparsable login body")
        raise BadRequestError()

    if not isinstance(data, dict):
        raise BadRequestError()
    try:
        return LoginRequest.model_validate(data)
    except ValidationError:
        raise BadRequestError()


# ---------------------------------------------------
# Login
# ---------------------------------------------------
@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Login with Email and Password",
    description="Authenticates a user. Returns public user fields in the body; sets the session token in an HttpOnly cookie.",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": LoginRequest.model_json_schema()}},
        }
    },
)
@limiter.limit("10/minute")
async def login(
    request: Request,
    response: Response,
    payload: Annotated[LoginRequest, Depends(read_login_payload)],
    db: DBDep,
) -> LoginResponse:
    """
    Authenticates a user and stores the session token in a cookie.
    """
    client_ip = request.client.host if request.client else "unknown"
    result = await login_user(payload, db, client_ip)

    response.set_cookie(value=result.session_token, **session_cookie_params())
    return LoginResponse(user=AuthUserResponse.model_validate(result.user))


# ---------------------------------------------------
# Logout
# ---------------------------------------------------
@router.post(
    "/logout",
    response_model=LogoutResponse,
    status_code=status.HTTP_200_OK,
    summary="Logout User",
    description="Clears the session cookie. Issued tokens stay valid until they expire.",
)
async def logout(response: Response) -> LogoutResponse:
    """Removes the session cookie from the browser."""
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )
    return LogoutResponse()


# ---------------------------------------------------
# Current User
# ---------------------------------------------------
@router.get(
    "/me",
    response_model=AuthUserResponse,
    status_code=status.HTTP_200_OK,
    summary="Current User",
    description="Returns the public fields of the signed-in user.",
)
async def read_current_user(
    current_user: Annotated[User, Depends(get_current_user)],
) -> AuthUserResponse:
    return AuthUserResponse.model_validate(current_user)

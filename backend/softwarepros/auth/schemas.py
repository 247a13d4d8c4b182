"""
auth/schemas.py

Defines Pydantic models for the login flow:
- Login request payload
- Public user fields returned to the client
- Login and logout response structures
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from softwarepros.database.enums import UserRole


# --------------------------------------------------
# AUTH REQUEST SCHEMAS
# --------------------------------------------------

class LoginRequest(BaseModel):
    """
    Request schema for user login using JSON payload.
    Presence is checked by the authenticator so that missing
    fields answer 400 rather than a validation error.
    """
    email: str | None = Field(default=None, description="User email address")
    password: str | None = Field(default=None, description="User password")


# --------------------------------------------------
# AUTH RESPONSE SCHEMAS
# --------------------------------------------------

class AuthUserResponse(BaseModel):
    """
    Public user fields exposed after authentication.
    """
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str | None = None
    role: UserRole


class LoginResponse(BaseModel):
    """
    Response for a successful login. The session token travels in an HttpOnly cookie.
    """
    success: bool = True
    user: AuthUserResponse


class LogoutResponse(BaseModel):
    success: bool = True

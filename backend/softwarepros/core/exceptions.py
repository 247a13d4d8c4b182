"""
core/exceptions.py

Description:
Defines a standard error response format for the API and the
denial reasons returned by the login flow.
"""

from typing import Any

from fastapi import HTTPException, status


class APIError(HTTPException):
    """Custom exception with standardized error response."""

    def __init__(self, status_code: int, message: str, headers: dict[str, Any] | None = None):
        super().__init__(status_code=status_code, detail={"error": message}, headers=headers)
        self.message = message


# ---------------------------------------------------
# Login Denial Reasons
# ---------------------------------------------------
class AuthError(APIError):
    """Base class for every login denial."""

    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    message_default = "Internal server error"

    def __init__(self, message: str | None = None, headers: dict[str, Any] | None = None):
        super().__init__(
            status_code=self.status_code_default,
            message=message or self.message_default,
            headers=headers,
        )


class BadRequestError(AuthError):
    status_code_default = status.HTTP_400_BAD_REQUEST
    message_default = "Email and password are required"


class InvalidCredentialsError(AuthError):
    """Raised for an unknown email and for a wrong password alike."""

    status_code_default = status.HTTP_401_UNAUTHORIZED
    message_default = "Invalid email or password"


class ServiceUnavailableError(AuthError):
    status_code_default = status.HTTP_503_SERVICE_UNAVAILABLE
    message_default = "Authentication service temporarily unavailable"


class InternalError(AuthError):
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    message_default = "Internal server error"

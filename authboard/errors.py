"""Exception taxonomy shared by the store, the auth service and the HTTP layer."""
from __future__ import annotations

from fastapi import status


class AuthError(RuntimeError):
    """Base class for errors that are reported to API callers."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthError):
    """Raised when required input is missing or malformed."""

    default_message = "All fields are required"


class DuplicateEmail(AuthError):
    """Raised when a user with the same email is already stored."""

    default_message = "Email already registered"


class InvalidCredentials(AuthError):
    """Raised for an unknown email or a wrong password, deliberately alike."""

    default_message = "Invalid email or password"


class MissingToken(AuthError):
    """Raised when a protected route is called without a bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Access token required"


class InvalidToken(AuthError):
    """Raised when a bearer token is forged, malformed or expired."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid or expired token"


class UserNotFound(AuthError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User not found"


class StoreUnavailable(AuthError):
    """Raised when the credential store cannot complete an operation."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Credential store unavailable"


__all__ = [
    "AuthError",
    "DuplicateEmail",
    "InvalidCredentials",
    "InvalidToken",
    "MissingToken",
    "StoreUnavailable",
    "UserNotFound",
    "ValidationError",
]

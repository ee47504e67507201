"""Domain errors raised by the auth service and translated at the HTTP boundary."""
from __future__ import annotations


class FlixAuthError(Exception):
    """Base class for errors that map onto an HTTP status and a single message."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FlixAuthError):
    status_code = 400
    default_message = "Invalid request"


class ConflictError(FlixAuthError):
    status_code = 400
    default_message = "User ID, username, or email already exists"


class AuthError(FlixAuthError):
    status_code = 401
    default_message = "Invalid credentials"


class MissingTokenError(AuthError):
    default_message = "Access token required"


class InvalidTokenError(AuthError):
    status_code = 403
    default_message = "Invalid or expired token"


class NotFoundError(FlixAuthError):
    status_code = 404
    default_message = "User not found"


class UnexpectedError(FlixAuthError):
    pass

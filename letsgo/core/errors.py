"""
Domain error taxonomy.

Each error carries the HTTP status and the stable ``kind`` reported to
clients. Handlers in ``letsgo.main`` turn them into JSON responses.
"""

from typing import Any, Dict, Optional

from fastapi import status

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


class AppError(Exception):
    """Base class for errors mapped to a client-facing response."""

    kind = "ServerError"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error, please try again later"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        detail: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message or self.default_message
        self.detail = detail
        self.extra = extra or {}
        self.headers = headers
        super().__init__(self.message)


class Unauthenticated(AppError):
    kind = "Unauthenticated"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Access denied: no token supplied"

    def __init__(self, message: Optional[str] = None, **kwargs):
        kwargs.setdefault("headers", BEARER_CHALLENGE)
        super().__init__(message, **kwargs)


class MalformedToken(Unauthenticated):
    kind = "MalformedToken"
    default_message = "Malformed authorization header"


class InvalidOrExpiredToken(Unauthenticated):
    kind = "InvalidOrExpiredToken"
    default_message = "Invalid or expired token"


class NotFound(AppError):
    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class Conflict(AppError):
    # Duplicate email is reported as a plain 400 to match existing clients
    kind = "Conflict"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "This email is already registered"


class Forbidden(AppError):
    kind = "Forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action"


class ValidationFailed(AppError):
    kind = "ValidationError"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class ServerError(AppError):
    """Unexpected failure; ``detail`` is only exposed outside production."""

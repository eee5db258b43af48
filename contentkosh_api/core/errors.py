"""
Typed API errors raised by services and dependencies.

Each error carries the HTTP status it maps to; the exception handlers in
contentkosh_api.api.main turn them into the standard response envelope.
"""
from __future__ import annotations

from fastapi import status


class ApiError(Exception):
    """Base class for errors that map directly to an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type: str = "internal_error"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "bad_request"


class UnauthorizedError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_type = "unauthorized"


class AuthError(ApiError):
    """Credential failure during login or token refresh."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_type = "auth_error"

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class ForbiddenError(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    error_type = "forbidden"


class NotFoundError(ApiError):
    """Raised with a resource name; the message reads '<resource> not found' unless given."""

    status_code = status.HTTP_404_NOT_FOUND
    error_type = "not_found"

    def __init__(self, resource: str, message: str | None = None) -> None:
        super().__init__(message or f"{resource} not found")


class AlreadyExistsError(ApiError):
    """Raised with a resource description; the message reads '<resource> already exists' unless given."""

    status_code = status.HTTP_409_CONFLICT
    error_type = "already_exists"

    def __init__(self, resource: str, message: str | None = None) -> None:
        super().__init__(message or f"{resource} already exists")

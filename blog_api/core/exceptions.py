"""HTTP exceptions used across the API.

Every exception renders as ``{"message": ..., "details": ...}`` through the
handlers registered in :mod:`blog_api.main`; ``details`` is omitted when None.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base exception carrying an optional ``details`` payload."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal Server Error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(
            status_code=self.status_code,
            detail=message or self.default_message,
            headers=headers,
        )
        self.details = details

    @property
    def message(self) -> str:
        return self.detail


class BadRequestException(AppException):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class UnauthorizedException(AppException):
    """Missing, invalid or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        super().__init__(message, details, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenException(AppException):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Insufficient permissions"


class NotFoundException(AppException):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictException(AppException):
    """Uniqueness violations."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class UpstreamServiceException(AppException):
    """Failures of external services (media storage, YouTube)."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Upstream service error"


__all__ = [
    "AppException",
    "BadRequestException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ConflictException",
    "UpstreamServiceException",
]

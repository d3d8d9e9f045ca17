"""
Domain error taxonomy

Every error raised by services and routes derives from CRMError and carries
the HTTP status it is rendered with.
"""
from typing import Optional

from fastapi import status


class CRMError(Exception):
    """Base exception for the CRM backend."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ValidationError(CRMError):
    """Input is well-formed but violates a business rule."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(CRMError):
    """Missing, invalid or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(CRMError):
    """Authenticated, but the role or ownership check failed."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(CRMError):
    """Referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(CRMError):
    """Operation collides with existing state."""

    status_code = status.HTTP_409_CONFLICT

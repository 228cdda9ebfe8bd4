"""
Service-level errors.

Services raise these instead of HTTP exceptions; `bnusa.main` turns them into
`{"success": false, "error": ...}` responses with the matching status code.
"""

from fastapi import status


class BnusaError(Exception):
    """Base class for errors that carry a client-safe message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BnusaError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST


class ForbiddenError(BnusaError):
    """Caller is authenticated but does not own the resource."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(BnusaError):
    """Resource is absent, unpublished, or not visible to the caller."""

    status_code = status.HTTP_404_NOT_FOUND


class RateLimitError(BnusaError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS


class OperationFailedError(BnusaError):
    """A write that should have matched rows did not."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

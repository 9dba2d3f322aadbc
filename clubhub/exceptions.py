"""Domain errors raised by the notification services.

Every error carries the HTTP status and machine-readable code it is rendered
with, so routers can let them propagate to the application exception handler.
"""

from fastapi import status


class ClubhubError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_error(self, request_id: str | None = None) -> dict:
        return {"code": self.code, "message": self.message, "request_id": request_id}


class ValidationError(ClubhubError):
    """A required field is missing or malformed."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field

    def to_error(self, request_id: str | None = None) -> dict:
        error = super().to_error(request_id)
        error["field"] = self.field
        return error


class NotFound(ClubhubError):
    """A referenced member or record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class PermissionDenied(ClubhubError):
    """The caller's role does not allow the operation."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"


class StoreUnavailable(ClubhubError):
    """The database could not be reached; nothing about the request is guaranteed."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "STORE_UNAVAILABLE"


class ProviderError(ClubhubError):
    """The push provider rejected or failed a send.

    Caught and aggregated by the dispatch service; never rendered to callers.
    """

    status_code = status.HTTP_502_BAD_GATEWAY
    code = "PROVIDER_ERROR"


class TokenUnregistered(ProviderError):
    """The device token is invalid or no longer registered with the provider."""

"""Application error taxonomy.

Every domain failure is a ``PeerReviewError`` subclass carrying a stable
machine-readable ``code`` and the HTTP status the API reports it with.
Services raise these; ``peerreview.api.responses`` turns them into the
error envelope.
"""

from typing import Any, Optional


class PeerReviewError(Exception):
    """Base class for all expected application errors."""

    code = "INTERNAL_ERROR"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            data["details"] = self.details
        return data


class ValidationError(PeerReviewError):
    """Malformed or out-of-range input. ``details`` lists the failing fields."""

    code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "Validation failed"


class AuthenticationError(PeerReviewError):
    """The caller could not be identified."""

    code = "AUTHENTICATION_REQUIRED"
    status_code = 401
    default_message = "Authentication required"


class UnauthorizedError(PeerReviewError):
    """The caller does not own the resource it tries to change."""

    code = "UNAUTHORIZED"
    status_code = 403
    default_message = "Not allowed to modify this resource"


class ForbiddenError(PeerReviewError):
    code = "FORBIDDEN"
    status_code = 403
    default_message = "Access denied"


class NotFoundError(PeerReviewError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"

    @classmethod
    def for_resource(cls, resource: str, resource_id: Any) -> "NotFoundError":
        return cls(f"{resource} {resource_id} not found")


class ConflictError(PeerReviewError):
    code = "CONFLICT"
    status_code = 409
    default_message = "Resource already exists"


class InvalidStateError(PeerReviewError):
    """Action not permitted in the current lifecycle state."""

    code = "INVALID_STATE"
    status_code = 409
    default_message = "Action not allowed in the current state"


class InternalError(PeerReviewError):
    """Storage or other infrastructure failure; reported without detail."""

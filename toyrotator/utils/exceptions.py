"""Custom exceptions for ToyRotator backend.

Every exception carries the callable error code the client switches on
(``unauthenticated``, ``invalid-argument``, ...) together with the HTTP
status used when the error is rendered as a response.
"""

from typing import Any, Dict, Optional


class ToyRotatorException(Exception):
    """Base exception for ToyRotator application."""

    code: str = "internal"
    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize ToyRotatorException.

        Args:
            message: Human-readable error message.
            details: Additional error details.
        """
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class UnauthenticatedError(ToyRotatorException):
    """Raised when the caller is not signed in or the token is invalid."""

    code = "unauthenticated"
    status_code = 401
    default_message = "User must be authenticated to call this function"


class InvalidArgumentError(ToyRotatorException):
    """Raised when a required argument is missing or malformed."""

    code = "invalid-argument"
    status_code = 400
    default_message = "Invalid argument"


class NotFoundError(ToyRotatorException):
    """Raised when a resource is not found."""

    code = "not-found"
    status_code = 404
    default_message = "Resource not found"


class FailedPreconditionError(ToyRotatorException):
    """Raised when the resource is not in the state the operation requires."""

    code = "failed-precondition"
    status_code = 412
    default_message = "Operation not allowed in the current state"


class PermissionDeniedError(ToyRotatorException):
    """Raised when user is not allowed to perform the operation."""

    code = "permission-denied"
    status_code = 403
    default_message = "Insufficient permissions"


class ResourceExhaustedError(ToyRotatorException):
    """Raised when a usage limit has been reached."""

    code = "resource-exhausted"
    status_code = 429
    default_message = "Usage limit reached"


class AlreadyExistsError(ToyRotatorException):
    """Raised when creating something that already exists."""

    code = "already-exists"
    status_code = 409
    default_message = "Resource already exists"


class InternalError(ToyRotatorException):
    """Raised for configuration or dependency failures."""

    code = "internal"
    status_code = 500
    default_message = "Internal error"

"""
Base exception classes for Tether.

Each module defines its own exceptions that inherit from these bases.
Collaborator failures are normalized into this taxonomy at the adapter
boundary, so flow logic never inspects provider-specific error shapes.
"""

from typing import Optional, Any

GENERIC_ERROR_MESSAGE = "An error occurred"


class TetherError(Exception):
    """
    Base exception for all Tether errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for display or logging."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(TetherError):
    """
    Local input validation failed.

    Carries one message per offending field. Never produced by a
    collaborator and never sent to one.
    """

    def __init__(
        self,
        field_errors: dict[str, str],
        message: str = "Please correct the highlighted fields",
    ):
        super().__init__(
            message,
            code="VALIDATION_ERROR",
            details={"fields": dict(field_errors)},
        )
        self.field_errors = dict(field_errors)


class ExternalServiceError(TetherError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service


class RequestTimeoutError(ExternalServiceError):
    """Raised when a collaborator call does not complete in time."""

    def __init__(self, service: str, timeout: float):
        super().__init__(
            "The request timed out. Please try again.",
            service=service,
            code="REQUEST_TIMEOUT",
            details={"timeout_seconds": timeout},
        )


class UnknownError(TetherError):
    """Raised for failures that carry no usable message."""

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE):
        super().__init__(message, code="UNKNOWN_ERROR")


def describe_error(error: BaseException) -> str:
    """
    Get a human-readable message for any raised value.

    Provider errors (postgrest, supabase auth) expose a ``message``
    attribute; anything else falls back to its string form, and finally
    to a generic message.
    """
    message = getattr(error, "message", None)
    if isinstance(message, str) and message.strip():
        return message
    text = str(error)
    if text.strip():
        return text
    return GENERIC_ERROR_MESSAGE

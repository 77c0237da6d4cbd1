"""
Profile module exceptions.

Store failures are normalized into StoreError at the repository boundary.
"""

from typing import Optional

from shared.exceptions import ExternalServiceError, GENERIC_ERROR_MESSAGE, describe_error

PROFILE_STORE_SERVICE = "profile_store"


class StoreError(ExternalServiceError):
    """Raised when the profile store fails a read or write."""

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE, code: Optional[str] = None):
        super().__init__(message, service=PROFILE_STORE_SERVICE, code=code or "STORE_ERROR")

    @classmethod
    def from_exception(cls, error: BaseException) -> "StoreError":
        """Normalize any store error into a StoreError."""
        if isinstance(error, StoreError):
            return error
        code = getattr(error, "code", None)
        return cls(describe_error(error), code=str(code) if code else None)

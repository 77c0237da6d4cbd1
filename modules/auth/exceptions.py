"""
Authentication module exceptions.

Identity-provider failures are normalized into AuthError at the adapter
boundary; the sign-in flow turns them into its Failed state.
"""

from typing import Optional

from shared.exceptions import ExternalServiceError, GENERIC_ERROR_MESSAGE, describe_error

IDENTITY_SERVICE = "identity"


class AuthError(ExternalServiceError):
    """Raised when the identity provider rejects or fails a request."""

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE, code: Optional[str] = None):
        super().__init__(message, service=IDENTITY_SERVICE, code=code or "AUTH_ERROR")

    @classmethod
    def from_exception(cls, error: BaseException) -> "AuthError":
        """Normalize any provider error into an AuthError."""
        if isinstance(error, AuthError):
            return error
        code = getattr(error, "code", None)
        return cls(describe_error(error), code=str(code) if code else None)


class InvalidSignInLinkError(AuthError):
    """Raised when a followed link carries no usable session."""

    def __init__(self, message: str = "The sign-in link is invalid or has expired"):
        super().__init__(message, code="INVALID_SIGN_IN_LINK")

"""
Authentication module.

Handles passwordless sign-in with emailed magic links.

Public API:
- IIdentityProvider: Interface for identity operations
- SignInFlow: Sign-in state machine
- EmailInput: Sign-in form model
- Auth exceptions: AuthError, InvalidSignInLinkError
"""

from .interfaces import IIdentityProvider
from .models import EmailInput
from .flow import SignInFlow
from .exceptions import AuthError, InvalidSignInLinkError

__all__ = [
    # Interface
    "IIdentityProvider",
    # Flow
    "SignInFlow",
    # Models
    "EmailInput",
    # Exceptions
    "AuthError",
    "InvalidSignInLinkError",
]

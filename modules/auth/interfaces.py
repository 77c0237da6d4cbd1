"""
Authentication module interface.

Flows depend on IIdentityProvider, not the concrete Supabase implementation.
This enables testing with in-memory fakes.
"""

from typing import Callable, Optional, Protocol, runtime_checkable

from shared.models import Session
from shared.state import Unsubscribe


@runtime_checkable
class IIdentityProvider(Protocol):
    """
    Interface for passwordless identity operations.

    Implementations must normalize every failure into AuthError.
    """

    async def request_magic_link(self, email: str) -> None:
        """
        Send a single-use sign-in link to an email address.

        Args:
            email: Already-validated email address

        Raises:
            AuthError: If the provider refuses or fails the request
        """
        ...

    async def get_current_session(self) -> Optional[Session]:
        """
        Get the session established by a followed magic link.

        Returns:
            Session if signed in, None otherwise
        """
        ...

    async def complete_sign_in(self, link: str) -> Session:
        """
        Establish a session from the URL the magic link redirected to.

        Args:
            link: Redirect URL carrying the auth code or tokens

        Raises:
            AuthError: If the link is invalid, expired or rejected
        """
        ...

    async def sign_out(self) -> None:
        """End the current session. Never raises."""
        ...

    def on_session_change(
        self, listener: Callable[[Optional[Session]], None]
    ) -> Unsubscribe:
        """
        Register for session change notifications.

        Returns:
            Callable that cancels the subscription
        """
        ...

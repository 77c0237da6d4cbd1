"""
Identity provider implementation.

Passwordless sign-in through Supabase Auth magic links.
"""

import logging
from typing import Any, Callable, Optional
from urllib.parse import parse_qs, urlsplit

from supabase import AsyncClient

from shared.config import get_settings
from shared.models import Session
from shared.state import Unsubscribe

from .exceptions import AuthError, InvalidSignInLinkError
from .interfaces import IIdentityProvider

logger = logging.getLogger(__name__)


def _to_session(auth_session: Any) -> Optional[Session]:
    """Map a Supabase auth session to our Session, or None if absent."""
    if auth_session is None or getattr(auth_session, "user", None) is None:
        return None
    user = auth_session.user
    return Session(user_id=str(user.id), email=user.email or "")


def _link_params(link: str) -> dict[str, str]:
    """Collect query and fragment parameters of a redirect URL."""
    parts = urlsplit(link.strip())
    params: dict[str, str] = {}
    for raw in (parts.query, parts.fragment):
        for key, values in parse_qs(raw).items():
            if values:
                params[key] = values[0]
    return params


class SupabaseIdentityProvider(IIdentityProvider):
    """
    Implementation of the identity provider.

    Uses Supabase Auth one-time-password emails for sign-in. The client
    keeps the session in memory, so one instance should live as long as
    the application.
    """

    def __init__(self, client: AsyncClient, email_redirect_url: Optional[str] = None):
        self._client = client
        self._redirect_url = email_redirect_url or get_settings().email_redirect_url

    async def request_magic_link(self, email: str) -> None:
        """Ask Supabase to email a magic link, creating the user if needed."""
        credentials: dict[str, Any] = {"email": email, "options": {"should_create_user": True}}
        if self._redirect_url:
            credentials["options"]["email_redirect_to"] = self._redirect_url

        try:
            await self._client.auth.sign_in_with_otp(credentials)
        except Exception as e:
            raise AuthError.from_exception(e) from e

        logger.info("Magic link requested for %s", email)

    async def get_current_session(self) -> Optional[Session]:
        """Get the in-memory session, if any."""
        try:
            auth_session = await self._client.auth.get_session()
        except Exception as e:
            logger.warning("Could not read current session: %s", e)
            return None
        return _to_session(auth_session)

    async def complete_sign_in(self, link: str) -> Session:
        """
        Establish a session from a magic-link redirect URL.

        Supports the PKCE flow (``?code=``), token-hash confirmation links
        (``?token_hash=&type=``) and the implicit flow (``#access_token=``).
        """
        params = _link_params(link)

        if "error_description" in params or "error" in params:
            raise InvalidSignInLinkError(params.get("error_description") or params["error"])

        try:
            if "code" in params:
                exchange: dict[str, Any] = {"auth_code": params["code"]}
                if self._redirect_url:
                    exchange["redirect_to"] = self._redirect_url
                response = await self._client.auth.exchange_code_for_session(exchange)
            elif "token_hash" in params:
                response = await self._client.auth.verify_otp(
                    {"token_hash": params["token_hash"], "type": params.get("type", "email")}
                )
            elif "access_token" in params and "refresh_token" in params:
                response = await self._client.auth.set_session(
                    params["access_token"], params["refresh_token"]
                )
            else:
                raise InvalidSignInLinkError()
        except AuthError:
            raise
        except Exception as e:
            raise AuthError.from_exception(e) from e

        session = _to_session(getattr(response, "session", None))
        if session is None:
            raise InvalidSignInLinkError()

        logger.info("Signed in as %s", session.user_id)
        return session

    async def sign_out(self) -> None:
        """Sign out. Failures are logged; the local session ends regardless."""
        try:
            await self._client.auth.sign_out()
        except Exception as e:
            logger.warning("Sign-out request failed: %s", e)

    def on_session_change(
        self, listener: Callable[[Optional[Session]], None]
    ) -> Unsubscribe:
        """Forward Supabase auth state changes as Session values."""

        def _callback(event: Any, auth_session: Any) -> None:
            logger.debug("Auth state change: %s", event)
            listener(_to_session(auth_session))

        subscription = self._client.auth.on_auth_state_change(_callback)
        return subscription.unsubscribe

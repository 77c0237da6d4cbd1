"""
Sign-in flow.

Turns a candidate email address into a dispatched magic-link request,
or a reported failure. Malformed addresses never reach the provider.
"""

import logging
from typing import Optional

from shared.config import get_settings
from shared.exceptions import TetherError, ValidationError, describe_error
from shared.models import FlowState, Notice, NoticeVariant
from shared.state import Observable, bounded_call
from shared.validation import validate_form

from .exceptions import IDENTITY_SERVICE
from .interfaces import IIdentityProvider
from .models import EmailInput

logger = logging.getLogger(__name__)


class SignInFlow(Observable["SignInFlow"]):
    """
    State machine for requesting a magic link.

    ``Idle -> Pending -> {Succeeded, Failed}``. Listeners receive the flow
    itself after every change; user-facing notices go to ``notices``.

    Attributes:
        state: Current FlowState
        email: Current value of the email input
        field_errors: Validation message per field
        link_sent: Sticky confirmation that a link was sent. Survives
            re-entering Idle; cleared by the next submit or by reset()
    """

    def __init__(self, identity: IIdentityProvider, timeout: Optional[float] = None):
        super().__init__()
        self._identity = identity
        self._timeout = timeout if timeout is not None else get_settings().request_timeout_seconds
        self.state = FlowState.idle()
        self.email = ""
        self.field_errors: dict[str, str] = {}
        self.link_sent = False
        self.notices: Observable[Notice] = Observable()

    def set_email(self, value: str) -> None:
        """Edit the input. Leaves a terminal state for Idle."""
        if self.state.is_pending:
            return
        self.email = value
        self.field_errors.pop("email", None)
        if self.state.is_terminal:
            self.state = FlowState.idle()
        self.emit(self)

    def reset(self) -> None:
        """Return to a blank form (user navigated away)."""
        if self.state.is_pending:
            return
        self.state = FlowState.idle()
        self.email = ""
        self.field_errors = {}
        self.link_sent = False
        self.emit(self)

    async def submit(self, email: Optional[str] = None) -> FlowState:
        """
        Request a magic link for ``email`` (or the current input value).

        A submit while a request is pending is ignored. Invalid input is
        rejected with a field error and the flow stays Idle.

        Returns:
            The state the flow ended in
        """
        if self.state.is_pending:
            logger.debug("Sign-in submit ignored: request already pending")
            return self.state

        if email is not None:
            self.email = email

        try:
            form = validate_form(EmailInput, {"email": self.email})
        except ValidationError as e:
            self.field_errors = e.field_errors
            self.state = FlowState.idle()
            self.emit(self)
            return self.state

        self.field_errors = {}
        self.link_sent = False
        self.state = FlowState.pending()
        self.emit(self)

        try:
            await bounded_call(
                self._identity.request_magic_link(form.email),
                IDENTITY_SERVICE,
                self._timeout,
            )
        except TetherError as e:
            self._fail(e.message)
        except Exception as e:
            logger.exception("Unexpected error requesting magic link")
            self._fail(describe_error(e))
        else:
            self.state = FlowState.succeeded()
            self.link_sent = True
            self.email = ""
            self.emit(self)
            self.notices.emit(
                Notice(
                    title="Magic link sent!",
                    description="Check your email for the login link.",
                )
            )

        return self.state

    def _fail(self, reason: str) -> None:
        logger.info("Magic link request failed: %s", reason)
        self.state = FlowState.failed(reason)
        self.emit(self)
        self.notices.emit(
            Notice(title="Error", description=reason, variant=NoticeVariant.DESTRUCTIVE)
        )

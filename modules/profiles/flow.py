"""
Profile sync flow.

Binds to one Session, loads its profile, validates edits and persists
them. Loading and submitting have independent states; the form is usable
only once loading has succeeded.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from modules.auth.exceptions import IDENTITY_SERVICE
from modules.auth.interfaces import IIdentityProvider
from shared.config import get_settings
from shared.exceptions import TetherError, ValidationError, describe_error
from shared.models import FlowState, FlowStatus, Notice, Session
from shared.state import Observable, bounded_call
from shared.validation import validate_form

from .exceptions import PROFILE_STORE_SERVICE
from .interfaces import IProfileStore
from .models import ProfileFields, ProfileRecord, empty_fields

logger = logging.getLogger(__name__)


class ProfileSyncFlow(Observable["ProfileSyncFlow"]):
    """
    State machine for one signed-in user's profile.

    An instance is tied to a single Session for its whole life; a different
    user gets a new instance. After sign-out the instance is inactive: any
    call still in flight completes, but its result no longer changes state.

    Attributes:
        session: The session this flow is bound to
        load_state: State of the profile read
        submit_state: State of the last form submission
        fields: Current editable values (username, website, avatar_url)
        field_errors: Validation message per field
        error: Message of the last failed load or submit, if any
    """

    def __init__(
        self,
        session: Session,
        store: IProfileStore,
        identity: IIdentityProvider,
        on_signed_out: Optional[Callable[[], None]] = None,
        timeout: Optional[float] = None,
        max_load_attempts: Optional[int] = None,
    ):
        super().__init__()
        settings = get_settings()
        self.session = session
        self._store = store
        self._identity = identity
        self._on_signed_out = on_signed_out
        self._timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self._max_load_attempts = (
            max_load_attempts if max_load_attempts is not None else settings.max_load_attempts
        )
        self._load_attempts = 0
        self._active = True

        self.load_state = FlowState.idle()
        self.submit_state = FlowState.idle()
        self.fields: dict[str, str] = empty_fields()
        self.field_errors: dict[str, str] = {}
        self.error: Optional[str] = None
        self.notices: Observable[Notice] = Observable()

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def active(self) -> bool:
        return self._active

    @property
    def email(self) -> str:
        return self.session.email

    @property
    def form_ready(self) -> bool:
        """The form may be shown and submitted."""
        return self._active and self.load_state.status == FlowStatus.SUCCEEDED

    @property
    def initials(self) -> str:
        """Avatar fallback: first letter of the username, or "U"."""
        username = self.fields.get("username", "")
        return username[:1].upper() or "U"

    @property
    def can_retry_load(self) -> bool:
        return (
            self._active
            and self.load_state.status == FlowStatus.FAILED
            and self._load_attempts < self._max_load_attempts
        )

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def load(self) -> FlowState:
        """
        Read the session owner's profile into the form.

        A missing profile is not an error: the form starts empty. On failure
        the fields keep their defaults and the form stays unavailable.
        Reloading after a failure counts against the attempt cap.
        """
        if not self._active or self.load_state.is_pending:
            return self.load_state
        if self.load_state.status == FlowStatus.FAILED and not self.can_retry_load:
            logger.warning("Profile load refused after %d attempts", self._load_attempts)
            self.error = (
                f"Unable to load your profile after {self._load_attempts} attempts. "
                "Please sign in again."
            )
            self.emit(self)
            return self.load_state

        self._load_attempts += 1
        self.error = None
        self.load_state = FlowState.pending()
        self.emit(self)

        try:
            record = await bounded_call(
                self._store.read_profile(self.session.user_id),
                PROFILE_STORE_SERVICE,
                self._timeout,
            )
        except TetherError as e:
            reason = e.message
        except Exception as e:
            logger.exception("Unexpected error loading profile")
            reason = describe_error(e)
        else:
            if not self._active:
                logger.debug("Discarding profile load for inactive flow")
                return self.load_state
            self.fields = record.to_fields() if record is not None else empty_fields()
            self.load_state = FlowState.succeeded()
            self.emit(self)
            return self.load_state

        if not self._active:
            logger.debug("Discarding failed profile load for inactive flow: %s", reason)
            return self.load_state
        logger.info("Profile load failed for %s: %s", self.session.user_id, reason)
        self.error = reason
        self.load_state = FlowState.failed(reason)
        self.emit(self)
        return self.load_state

    async def retry_load(self) -> FlowState:
        """
        Reload after a failure, at the user's request.

        Attempts per flow are capped; past the cap the flow stays Failed.
        """
        if self.load_state.status != FlowStatus.FAILED:
            return self.load_state
        return await self.load()

    async def submit(self, fields: Any) -> FlowState:
        """
        Validate and persist profile fields.

        Args:
            fields: Mapping (or ProfileFields) with username, website, avatar_url

        Returns:
            The submit state the flow ended in
        """
        if not self.form_ready:
            logger.debug("Profile submit ignored: form not ready")
            return self.submit_state
        if self.submit_state.is_pending:
            logger.debug("Profile submit ignored: save already pending")
            return self.submit_state

        try:
            form = validate_form(ProfileFields, fields)
        except ValidationError as e:
            self.field_errors = e.field_errors
            self.emit(self)
            return self.submit_state

        self.fields = form.model_dump()
        self.field_errors = {}
        self.error = None
        self.submit_state = FlowState.pending()
        self.emit(self)

        record = ProfileRecord(
            user_id=self.session.user_id,
            **self.fields,
            updated_at=datetime.now(timezone.utc),
        )

        try:
            await bounded_call(
                self._store.upsert_profile(record),
                PROFILE_STORE_SERVICE,
                self._timeout,
            )
        except TetherError as e:
            reason = e.message
        except Exception as e:
            logger.exception("Unexpected error saving profile")
            reason = describe_error(e)
        else:
            if not self._active:
                logger.info("Profile save completed after sign-out; result discarded")
                return self.submit_state
            self.submit_state = FlowState.succeeded()
            self.emit(self)
            self.notices.emit(
                Notice(
                    title="Profile updated",
                    description="Your profile has been successfully updated.",
                )
            )
            return self.submit_state

        if not self._active:
            logger.info("Profile save failed after sign-out; result discarded: %s", reason)
            return self.submit_state
        logger.info("Profile save failed for %s: %s", self.session.user_id, reason)
        self.error = reason
        self.submit_state = FlowState.failed(reason)
        self.emit(self)
        return self.submit_state

    async def sign_out(self) -> None:
        """
        Sign out and hand control back to sign-in.

        Does not wait for a pending save; that save's result is discarded.
        """
        try:
            await bounded_call(self._identity.sign_out(), IDENTITY_SERVICE, self._timeout)
        except TetherError as e:
            logger.warning("Sign-out did not complete: %s", e.message)
        except Exception:
            logger.exception("Unexpected error signing out")
        self.deactivate()
        if self._on_signed_out is not None:
            self._on_signed_out()
        self.notices.emit(
            Notice(title="Signed out", description="You have been successfully signed out.")
        )

    def deactivate(self) -> None:
        """Detach this flow from the UI; later results are ignored."""
        if not self._active:
            return
        self._active = False
        self.emit(self)

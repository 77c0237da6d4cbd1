"""
Account controller.

Owns the session slot and decides which flow is active: sign-in while no
session exists, a profile flow bound to the session's user otherwise.
"""

import asyncio
import logging
from typing import Optional, Union

from modules.auth.exceptions import IDENTITY_SERVICE
from modules.auth.flow import SignInFlow
from modules.auth.interfaces import IIdentityProvider
from modules.profiles.flow import ProfileSyncFlow
from modules.profiles.interfaces import IProfileStore
from shared.config import Settings, get_settings
from shared.models import Notice, Session
from shared.session import SessionStore
from shared.state import Observable, Unsubscribe, bounded_call

logger = logging.getLogger(__name__)


class AccountController(Observable["AccountController"]):
    """
    Host for the sign-in and profile flows.

    The active flow is a pure function of session presence. A profile flow
    is created (and loads once) when a user ID first appears; a session
    refresh for the same user keeps the existing flow.
    """

    def __init__(
        self,
        identity: IIdentityProvider,
        store: IProfileStore,
        session_store: Optional[SessionStore] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__()
        self._identity = identity
        self._store = store
        self._settings = settings or get_settings()
        self.session_store = session_store or SessionStore()
        self.notices: Observable[Notice] = Observable()

        self.sign_in = SignInFlow(identity, timeout=self._settings.request_timeout_seconds)
        self.profile: Optional[ProfileSyncFlow] = None

        self._load_task: Optional[asyncio.Task] = None
        # Cancelled loads of superseded flows, held until they finish
        self._retired_loads: set[asyncio.Task] = set()
        self._profile_unsubscribers: list[Unsubscribe] = []
        self._unsubscribers: list[Unsubscribe] = [
            self.sign_in.subscribe(lambda _flow: self.emit(self)),
            self.sign_in.notices.subscribe(self.notices.emit),
        ]

    @property
    def session(self) -> Optional[Session]:
        return self.session_store.current

    @property
    def active_flow(self) -> Union[SignInFlow, ProfileSyncFlow]:
        if self.session is None or self.profile is None:
            return self.sign_in
        return self.profile

    async def start(self) -> None:
        """Pick up an existing session and follow provider notifications."""
        self._unsubscribers.append(self.session_store.subscribe(self._on_session_change))
        self._unsubscribers.append(self._identity.on_session_change(self.session_store.set))
        session = await self._identity.get_current_session()
        self.session_store.set(session)
        await self.wait_for_load()

    async def wait_for_load(self) -> None:
        """Wait for the current profile flow's initial load, if any."""
        if self._load_task is not None and not self._load_task.done():
            await self._load_task

    async def complete_sign_in(self, link: str) -> Session:
        """
        Finish sign-in with the URL the magic link redirected to.

        Raises:
            AuthError: If the link does not yield a session
        """
        session = await bounded_call(
            self._identity.complete_sign_in(link),
            IDENTITY_SERVICE,
            self._settings.request_timeout_seconds,
        )
        self.session_store.set(session)
        await self.wait_for_load()
        return session

    async def close(self) -> None:
        """Stop following notifications and drop the profile flow."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self._drop_profile_flow()
        if self._retired_loads:
            await asyncio.gather(*self._retired_loads, return_exceptions=True)

    def _on_session_change(self, session: Optional[Session]) -> None:
        if session is None:
            logger.info("Session ended; returning to sign-in")
            self._drop_profile_flow()
            self.sign_in.reset()
        elif self.profile is None or self.profile.session.user_id != session.user_id:
            logger.info("Session started for %s", session.user_id)
            self._drop_profile_flow()
            self.sign_in.reset()
            self._start_profile_flow(session)
        elif session != self.profile.session:
            # Same user, refreshed details: rebind without reloading
            self.profile.session = session
        self.emit(self)

    def _start_profile_flow(self, session: Session) -> None:
        flow = ProfileSyncFlow(
            session,
            self._store,
            self._identity,
            on_signed_out=self.session_store.clear,
            timeout=self._settings.request_timeout_seconds,
            max_load_attempts=self._settings.max_load_attempts,
        )
        # Notices outlive the state subscription
        flow.notices.subscribe(self.notices.emit)
        self._profile_unsubscribers = [flow.subscribe(lambda _flow: self.emit(self))]
        self.profile = flow
        self._load_task = asyncio.get_running_loop().create_task(flow.load())

    def _drop_profile_flow(self) -> None:
        if self.profile is None:
            return
        flow = self.profile
        self.profile = None
        flow.deactivate()
        for unsubscribe in self._profile_unsubscribers:
            unsubscribe()
        self._profile_unsubscribers = []
        task, self._load_task = self._load_task, None
        if task is not None and not task.done():
            task.cancel()
            self._retired_loads.add(task)
            task.add_done_callback(self._retired_loads.discard)

"""Tests for the account controller."""

import asyncio

import pytest

from modules.account.controller import AccountController
from modules.auth.exceptions import AuthError
from modules.auth.flow import SignInFlow
from modules.profiles.flow import ProfileSyncFlow
from modules.profiles.models import ProfileRecord
from shared.config import Settings
from shared.models import FlowStatus, Session
from tests.fakes import FakeIdentityProvider, InMemoryProfileStore


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, request_timeout_seconds=1.0, max_load_attempts=2)


@pytest.fixture
def controller(identity, store, settings) -> AccountController:
    return AccountController(identity, store, settings=settings)


class TestAccountController:
    @pytest.mark.asyncio
    async def test_start_without_session(self, controller):
        """Without a session the sign-in flow should be active."""
        await controller.start()

        assert controller.session is None
        assert controller.profile is None
        assert isinstance(controller.active_flow, SignInFlow)

    @pytest.mark.asyncio
    async def test_start_with_existing_session(self, session, settings, test_user_id):
        """An existing session should activate and load the profile flow."""
        identity = FakeIdentityProvider(session)
        store = InMemoryProfileStore({
            test_user_id: ProfileRecord(user_id=test_user_id, username="Jo"),
        })
        controller = AccountController(identity, store, settings=settings)

        await controller.start()

        assert isinstance(controller.active_flow, ProfileSyncFlow)
        assert controller.profile.load_state.status == FlowStatus.SUCCEEDED
        assert controller.profile.fields["username"] == "Jo"
        assert store.reads == [test_user_id]

    @pytest.mark.asyncio
    async def test_complete_sign_in(self, controller, identity, store, session):
        """Following a valid link should switch to the profile flow."""
        identity.link_sessions["http://localhost/?code=ok"] = session
        await controller.start()

        result = await controller.complete_sign_in("http://localhost/?code=ok")

        assert result == session
        assert controller.session == session
        assert controller.profile.form_ready is True
        assert store.reads == [session.user_id]

    @pytest.mark.asyncio
    async def test_complete_sign_in_invalid_link(self, controller):
        """An invalid link should raise and leave sign-in active."""
        await controller.start()

        with pytest.raises(AuthError):
            await controller.complete_sign_in("http://localhost/?code=bad")

        assert isinstance(controller.active_flow, SignInFlow)

    @pytest.mark.asyncio
    async def test_session_refresh_does_not_reload(self, identity, store, settings, session):
        """A new session object for the same user should keep the flow."""
        identity.session = session
        controller = AccountController(identity, store, settings=settings)
        await controller.start()
        flow = controller.profile

        identity.notify(Session(user_id=session.user_id, email="renamed@example.com"))
        await controller.wait_for_load()

        assert controller.profile is flow
        assert store.reads == [session.user_id]
        assert flow.email == "renamed@example.com"

    @pytest.mark.asyncio
    async def test_different_user_gets_new_flow(self, identity, store, settings, session):
        """A different user should get a fresh flow and a new load."""
        identity.session = session
        controller = AccountController(identity, store, settings=settings)
        await controller.start()
        old_flow = controller.profile

        identity.notify(Session(user_id="other-user", email="other@example.com"))
        await controller.wait_for_load()

        assert controller.profile is not old_flow
        assert old_flow.active is False
        assert controller.profile.session.user_id == "other-user"
        assert store.reads == [session.user_id, "other-user"]

    @pytest.mark.asyncio
    async def test_superseded_load_is_cancelled(self, controller, identity, store, session):
        """Switching users mid-load should cancel the old flow's load."""
        await controller.start()
        store.read_gate = asyncio.Event()
        identity.notify(session)
        await asyncio.sleep(0)
        first_load = controller._load_task

        identity.notify(Session(user_id="other-user", email="other@example.com"))
        store.read_gate.set()
        await controller.wait_for_load()
        await asyncio.gather(first_load, return_exceptions=True)

        assert first_load.cancelled()
        assert controller.profile.session.user_id == "other-user"
        assert controller.profile.form_ready is True
        await controller.close()
        assert controller._retired_loads == set()

    @pytest.mark.asyncio
    async def test_sign_out_returns_to_sign_in(self, identity, store, settings, session):
        """Signing out from the profile flow should reactivate sign-in."""
        identity.session = session
        controller = AccountController(identity, store, settings=settings)
        notices = []
        controller.notices.subscribe(notices.append)
        await controller.start()
        flow = controller.profile

        await flow.sign_out()

        assert controller.session is None
        assert controller.profile is None
        assert isinstance(controller.active_flow, SignInFlow)
        assert flow.active is False
        assert identity.sign_out_calls == 1
        assert "Signed out" in [n.title for n in notices]

    @pytest.mark.asyncio
    async def test_provider_sign_out_notification(self, identity, store, settings, session):
        """A sign-out reported by the provider should also end the profile flow."""
        identity.session = session
        controller = AccountController(identity, store, settings=settings)
        await controller.start()

        identity.notify(None)

        assert controller.profile is None
        assert isinstance(controller.active_flow, SignInFlow)

    @pytest.mark.asyncio
    async def test_sign_in_flow_reset_on_session_change(self, controller, identity, session):
        """The sticky link notice should not survive a sign-in."""
        await controller.start()
        await controller.sign_in.submit("a@b.co")
        assert controller.sign_in.link_sent is True

        identity.notify(session)
        await controller.wait_for_load()

        assert controller.sign_in.link_sent is False

    @pytest.mark.asyncio
    async def test_forwards_sign_in_notices(self, controller):
        """Sign-in notices should reach controller subscribers."""
        notices = []
        controller.notices.subscribe(notices.append)
        await controller.start()

        await controller.sign_in.submit("a@b.co")

        assert [n.title for n in notices] == ["Magic link sent!"]

    @pytest.mark.asyncio
    async def test_emits_on_flow_changes(self, controller):
        """Controller listeners should hear about flow state changes."""
        changes = []
        controller.subscribe(changes.append)
        await controller.start()

        await controller.sign_in.submit("a@b.co")

        assert len(changes) >= 2
        assert all(change is controller for change in changes)

    @pytest.mark.asyncio
    async def test_close_stops_following_provider(self, controller, identity, session):
        """After close, provider notifications should be ignored."""
        await controller.start()
        await controller.close()

        identity.notify(session)

        assert controller.session is None
        assert controller.profile is None

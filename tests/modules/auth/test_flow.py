"""Tests for the sign-in flow."""

import asyncio

import pytest

from modules.auth.exceptions import AuthError
from modules.auth.flow import SignInFlow
from shared.models import FlowState, FlowStatus, NoticeVariant


class TestSignInFlow:
    @pytest.fixture
    def flow(self, identity):
        return SignInFlow(identity, timeout=1.0)

    def test_initial_state(self, flow):
        """A new flow should be idle with an empty form."""
        assert flow.state == FlowState.idle()
        assert flow.email == ""
        assert flow.link_sent is False
        assert flow.field_errors == {}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "email", ["not-an-email", "", "a@b", "a b@c.co", "<a@b.co>", "Jo<a@b.co>"]
    )
    async def test_invalid_email_never_reaches_provider(self, flow, identity, email):
        """Invalid input should be rejected locally and stay idle."""
        state = await flow.submit(email)

        assert state.status == FlowStatus.IDLE
        assert identity.requested == []
        assert "email" in flow.field_errors
        assert flow.email == email

    @pytest.mark.asyncio
    async def test_successful_submit(self, flow, identity):
        """A valid email should send one link, clear input and set the notice."""
        state = await flow.submit("a@b.co")

        assert state == FlowState.succeeded()
        assert identity.requested == ["a@b.co"]
        assert flow.email == ""
        assert flow.link_sent is True

    @pytest.mark.asyncio
    async def test_submit_uses_current_input(self, flow, identity):
        """submit() without an argument should use the edited value."""
        flow.set_email("test@example.com")
        await flow.submit()
        assert identity.requested == ["test@example.com"]

    @pytest.mark.asyncio
    async def test_failed_submit_preserves_input(self, flow, identity):
        """A provider failure should fail the flow and keep the input."""
        identity.fail_with = AuthError("Email rate limit exceeded")

        state = await flow.submit("a@b.co")

        assert state == FlowState.failed("Email rate limit exceeded")
        assert flow.link_sent is False
        assert flow.email == "a@b.co"

    @pytest.mark.asyncio
    async def test_failure_without_message_uses_generic_text(self, flow, identity):
        """Errors with no message should produce the generic message."""
        identity.fail_with = RuntimeError()

        state = await flow.submit("a@b.co")

        assert state.reason == "An error occurred"

    @pytest.mark.asyncio
    async def test_timeout_fails_flow(self, identity):
        """A request that never completes should fail after the timeout."""
        identity.gate = asyncio.Event()
        flow = SignInFlow(identity, timeout=0.01)

        state = await flow.submit("a@b.co")

        assert state.status == FlowStatus.FAILED
        assert "timed out" in state.reason

    @pytest.mark.asyncio
    async def test_reentrant_submit_is_noop(self, flow, identity):
        """A submit while pending should not call the provider again."""
        identity.gate = asyncio.Event()

        first = asyncio.create_task(flow.submit("a@b.co"))
        await asyncio.sleep(0)
        assert flow.state.is_pending

        second = await flow.submit("other@example.com")
        assert second.is_pending

        identity.gate.set()
        await first
        assert identity.requested == ["a@b.co"]
        assert flow.state == FlowState.succeeded()

    @pytest.mark.asyncio
    async def test_new_submit_clears_link_sent(self, flow, identity):
        """The sticky notice should clear when the next submit starts."""
        await flow.submit("a@b.co")
        identity.fail_with = AuthError("Nope")

        await flow.submit("a@b.co")

        assert flow.link_sent is False

    @pytest.mark.asyncio
    async def test_link_sent_survives_idle_reentry(self, flow):
        """Editing after success should return to idle but keep the notice."""
        await flow.submit("a@b.co")

        flow.set_email("x")

        assert flow.state == FlowState.idle()
        assert flow.link_sent is True

    @pytest.mark.asyncio
    async def test_invalid_submit_after_success_keeps_notice(self, flow, identity):
        """A rejected submit should not clear the notice or call the provider."""
        await flow.submit("a@b.co")

        await flow.submit("nope")

        assert flow.link_sent is True
        assert flow.state == FlowState.idle()
        assert identity.requested == ["a@b.co"]

    def test_set_email_clears_field_error(self, flow):
        """Editing the input should clear the email error."""
        flow.field_errors = {"email": "Please enter a valid email address."}
        flow.set_email("a@b.co")
        assert flow.field_errors == {}

    @pytest.mark.asyncio
    async def test_reset(self, flow):
        """reset() should clear everything, including the notice."""
        await flow.submit("a@b.co")

        flow.reset()

        assert flow.state == FlowState.idle()
        assert flow.link_sent is False
        assert flow.email == ""

    @pytest.mark.asyncio
    async def test_emits_state_changes(self, flow):
        """Listeners should see pending then succeeded."""
        seen = []
        flow.subscribe(lambda f: seen.append(f.state.status))

        await flow.submit("a@b.co")

        assert seen == [FlowStatus.PENDING, FlowStatus.SUCCEEDED]

    @pytest.mark.asyncio
    async def test_notices(self, flow, identity):
        """Success and failure should each emit a notice."""
        notices = []
        flow.notices.subscribe(notices.append)

        await flow.submit("a@b.co")
        identity.fail_with = AuthError("Nope")
        await flow.submit("a@b.co")

        assert notices[0].title == "Magic link sent!"
        assert notices[1].variant == NoticeVariant.DESTRUCTIVE
        assert notices[1].description == "Nope"

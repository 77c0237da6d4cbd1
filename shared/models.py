"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models stay in their respective module directories.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class Session(BaseModel):
    """
    The authenticated actor.

    Created by the identity provider once a magic link is followed.
    A new Session replaces the old one; it is never mutated.
    """

    user_id: str = Field(..., description="User ID (UUID from Supabase)")
    email: str = Field(..., description="User's email address")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",
    }


class FlowStatus(str, Enum):
    """Lifecycle of one user-triggered asynchronous operation."""

    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class FlowState(BaseModel):
    """Current state of a flow operation. ``reason`` is set only when failed."""

    status: FlowStatus = FlowStatus.IDLE
    reason: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def idle(cls) -> "FlowState":
        return cls(status=FlowStatus.IDLE)

    @classmethod
    def pending(cls) -> "FlowState":
        return cls(status=FlowStatus.PENDING)

    @classmethod
    def succeeded(cls) -> "FlowState":
        return cls(status=FlowStatus.SUCCEEDED)

    @classmethod
    def failed(cls, reason: str) -> "FlowState":
        return cls(status=FlowStatus.FAILED, reason=reason)

    @property
    def is_pending(self) -> bool:
        return self.status == FlowStatus.PENDING

    @property
    def is_terminal(self) -> bool:
        return self.status in (FlowStatus.SUCCEEDED, FlowStatus.FAILED)


class NoticeVariant(str, Enum):
    """Visual weight of a notice."""

    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


class Notice(BaseModel):
    """A transient user-facing notification emitted by a flow."""

    title: str
    description: str = ""
    variant: NoticeVariant = NoticeVariant.DEFAULT

    model_config = {"frozen": True}

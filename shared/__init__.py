"""
Shared infrastructure for Tether.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- session: The process-wide session slot
- state: Flow state scaffolding

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, reset_client_cache
from .exceptions import (
    TetherError,
    ValidationError,
    ExternalServiceError,
    RequestTimeoutError,
    UnknownError,
    describe_error,
)
from .models import Session, FlowState, FlowStatus, Notice, NoticeVariant
from .session import SessionStore

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "reset_client_cache",
    "TetherError",
    "ValidationError",
    "ExternalServiceError",
    "RequestTimeoutError",
    "UnknownError",
    "describe_error",
    "Session",
    "FlowState",
    "FlowStatus",
    "Notice",
    "NoticeVariant",
    "SessionStore",
]

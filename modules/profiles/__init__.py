"""
Profiles module.

Loads, validates and persists the signed-in user's profile.

Public API:
- IProfileStore: Interface for the remote profile store
- ProfileSyncFlow: Profile load/submit state machine
- ProfileFields, ProfileRecord: Form and persisted models
- StoreError: Store failure
"""

from .interfaces import IProfileStore
from .models import ProfileFields, ProfileRecord
from .flow import ProfileSyncFlow
from .exceptions import StoreError

__all__ = [
    # Interface
    "IProfileStore",
    # Flow
    "ProfileSyncFlow",
    # Models
    "ProfileFields",
    "ProfileRecord",
    # Exceptions
    "StoreError",
]

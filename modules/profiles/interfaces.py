"""
Profile module interface.

The sync flow depends on IProfileStore, not the concrete repository.
"""

from typing import Optional, Protocol, runtime_checkable

from .models import ProfileRecord


@runtime_checkable
class IProfileStore(Protocol):
    """
    Interface for the remote profile store.

    Implementations must normalize every failure into StoreError.
    """

    async def read_profile(self, user_id: str) -> Optional[ProfileRecord]:
        """
        Get the profile owned by a user.

        Args:
            user_id: Exact user ID to look up

        Returns:
            ProfileRecord if one exists, None otherwise

        Raises:
            StoreError: If the store cannot be read
        """
        ...

    async def upsert_profile(self, record: ProfileRecord) -> None:
        """
        Insert or replace the profile keyed by ``record.user_id``.

        Writing the same record twice leaves a single row.

        Raises:
            StoreError: If the write fails
        """
        ...

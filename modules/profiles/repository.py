"""
Profile repository for remote store access.

Encapsulates the Supabase queries and data mapping for the profiles table:
    id, username, website, avatar_url, updated_at
"""

import logging
from typing import Any, Optional

from supabase import AsyncClient

from shared.config import get_settings
from shared.repository import BaseRepository
from .exceptions import StoreError
from .interfaces import IProfileStore
from .models import ProfileRecord

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = "id, username, website, avatar_url, updated_at"


class ProfileRepository(BaseRepository[ProfileRecord], IProfileStore):
    """
    Repository for profile data access.

    Row Level Security on the table restricts every query to the signed-in
    user's own row; this class does not perform authorization checks.
    """

    def __init__(self, db: AsyncClient, table: Optional[str] = None) -> None:
        super().__init__(db)
        self._table = table or get_settings().profiles_table

    async def read_profile(self, user_id: str) -> Optional[ProfileRecord]:
        """
        Get the profile for a user.

        Args:
            user_id: The user's ID.

        Returns:
            ProfileRecord, or None if the user has not saved one yet.
        """
        try:
            result = (
                await self._db.table(self._table)
                .select(PROFILE_COLUMNS)
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise StoreError.from_exception(e) from e

        if not result.data:
            logger.debug("No profile stored for %s", user_id)
            return None

        return self._map_to_record(result.data[0])

    async def upsert_profile(self, record: ProfileRecord) -> None:
        """
        Insert or replace a profile row keyed by ``id``.

        Args:
            record: Complete profile to persist.
        """
        try:
            await (
                self._db.table(self._table)
                .upsert(self._map_to_row(record), on_conflict="id")
                .execute()
            )
        except Exception as e:
            raise StoreError.from_exception(e) from e

        logger.info("Profile saved for %s", record.user_id)

    # -------------------------------------------------------------------------
    # Mapping helpers
    # -------------------------------------------------------------------------

    def _map_to_record(self, data: dict[str, Any]) -> ProfileRecord:
        """Map a database row to ProfileRecord."""
        return ProfileRecord(
            user_id=str(data["id"]),
            username=data.get("username"),
            website=data.get("website"),
            avatar_url=data.get("avatar_url"),
            updated_at=data.get("updated_at"),
        )

    def _map_to_row(self, record: ProfileRecord) -> dict[str, Any]:
        """Map ProfileRecord to a database row."""
        return {
            "id": record.user_id,
            "username": record.username,
            "website": record.website,
            "avatar_url": record.avatar_url,
            "updated_at": record.updated_at.isoformat() if record.updated_at else None,
        }

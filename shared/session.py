"""
Process-wide session slot.

Holds at most one Session. Written only by identity-provider notifications
and by explicit sign-out; everything else reads it or subscribes to it.
"""

import logging
from typing import Optional

from .models import Session
from .state import Observable

logger = logging.getLogger(__name__)


class SessionStore(Observable[Optional[Session]]):
    """Single-writer, multi-reader cell holding the current Session."""

    def __init__(self, session: Optional[Session] = None) -> None:
        super().__init__()
        self._session = session

    @property
    def current(self) -> Optional[Session]:
        return self._session

    def set(self, session: Optional[Session]) -> None:
        """Replace the current session; listeners are notified only on change."""
        if session == self._session:
            return
        logger.debug(
            "Session changed: %s -> %s",
            self._session.user_id if self._session else None,
            session.user_id if session else None,
        )
        self._session = session
        self.emit(session)

    def clear(self) -> None:
        """Set the session to absent."""
        self.set(None)

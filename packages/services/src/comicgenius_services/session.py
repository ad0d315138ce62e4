"""Session management service."""

from typing import Optional

from comicgenius_core_schemas import ComicSession, NotFoundError
from comicgenius_storage import SessionManager, SessionStore, get_store


class SessionService:
    """Service for creating, loading and discarding sessions."""

    def __init__(self, store: Optional[SessionStore] = None):
        """Initialize service.

        Args:
            store: Session store (defaults to the global in-memory store)
        """
        self.store = store or get_store()

    def create(self) -> ComicSession:
        """Start a new, empty session."""
        return SessionManager.create(self.store).session

    def load(self, session_id: str) -> SessionManager:
        """Load a session.

        Raises:
            NotFoundError: If no session has that ID
        """
        if not self.store.session_exists(session_id):
            raise NotFoundError("Session", session_id)
        return SessionManager.load(self.store, session_id)

    def get(self, session_id: str) -> ComicSession:
        """Get session state by ID."""
        return self.load(session_id).session

    def delete(self, session_id: str) -> bool:
        """Discard a session and everything generated in it."""
        return self.store.delete_session(session_id)

    def list_sessions(
        self,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[ComicSession], int]:
        """List sessions, newest first.

        Returns:
            Tuple of (sessions, total_count)
        """
        sessions = self.store.list_sessions()
        total = len(sessions)
        return sessions[offset:offset + limit], total

"""Session storage backends for ComicGenius.

Sessions live only as long as the process; nothing is written to disk.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from comicgenius_core_schemas import ComicSession


class SessionStore(ABC):
    """Abstract base class for session stores."""

    @abstractmethod
    def save_session(self, session: ComicSession) -> None:
        """Save session state."""
        ...

    @abstractmethod
    def load_session(self, session_id: str) -> ComicSession:
        """Load session state."""
        ...

    @abstractmethod
    def session_exists(self, session_id: str) -> bool:
        """Check if a session exists."""
        ...

    @abstractmethod
    def delete_session(self, session_id: str) -> bool:
        """Delete a session."""
        ...

    @abstractmethod
    def list_sessions(self) -> list[ComicSession]:
        """List all sessions."""
        ...


class MemoryStore(SessionStore):
    """Process-local dictionary store."""

    def __init__(self):
        self._sessions: dict[str, ComicSession] = {}

    def save_session(self, session: ComicSession) -> None:
        session.updated_at = datetime.now()
        self._sessions[session.id] = session

    def load_session(self, session_id: str) -> ComicSession:
        if session_id not in self._sessions:
            raise KeyError(f"Session not found: {session_id}")
        return self._sessions[session_id]

    def session_exists(self, session_id: str) -> bool:
        return session_id in self._sessions

    def delete_session(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def list_sessions(self) -> list[ComicSession]:
        return sorted(self._sessions.values(), key=lambda s: s.created_at, reverse=True)


class SessionManager:
    """High-level handle on one session."""

    def __init__(self, store: SessionStore, session: Optional[ComicSession] = None):
        """Initialize with a store and, optionally, an already loaded session."""
        self.store = store
        self._session = session

    @classmethod
    def create(cls, store: SessionStore) -> "SessionManager":
        """Create and save a new empty session."""
        manager = cls(store, ComicSession())
        manager.save()
        return manager

    @classmethod
    def load(cls, store: SessionStore, session_id: str) -> "SessionManager":
        """Load an existing session.

        Raises:
            KeyError: If the session does not exist
        """
        return cls(store, store.load_session(session_id))

    @property
    def session(self) -> ComicSession:
        """Get the current session."""
        if self._session is None:
            raise RuntimeError("No session loaded")
        return self._session

    def save(self) -> None:
        """Save the current session."""
        if self._session is None:
            raise RuntimeError("No session to save")
        self.store.save_session(self._session)


# Global store instance
_store: Optional[MemoryStore] = None


def get_store() -> MemoryStore:
    """Get the global session store."""
    global _store
    if _store is None:
        _store = MemoryStore()
    return _store

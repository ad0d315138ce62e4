"""Session storage for ComicGenius."""

from comicgenius_storage.storage import MemoryStore, SessionManager, SessionStore, get_store

__all__ = ["MemoryStore", "SessionManager", "SessionStore", "get_store"]

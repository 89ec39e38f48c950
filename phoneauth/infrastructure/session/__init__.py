from .cookie_session_store import SignedCookieSessionStore
from .memory_session_store import InMemorySessionStore

__all__ = ["SignedCookieSessionStore", "InMemorySessionStore"]

import secrets
from typing import Any, Dict, Optional

from ...application.ports.session_store import SessionHandle
from .base import CookieSessionStoreBase


class InMemorySessionStore(CookieSessionStoreBase):
    """Server-side session data keyed by a random id; the cookie carries only the id."""

    def __init__(self, **cookie_options) -> None:
        super().__init__(**cookie_options)
        self._store: Dict[str, Dict[str, Any]] = {}

    def get(self, cookie_header: Optional[str]) -> SessionHandle:
        session_id = self.read_cookie(cookie_header)
        if session_id and session_id in self._store:
            return SessionHandle(self._store[session_id], id=session_id)
        return SessionHandle()

    def persist(self, handle: SessionHandle) -> str:
        if not handle.id:
            handle.id = secrets.token_urlsafe(32)
        self._store[handle.id] = dict(handle.data)
        return self.build_cookie(handle.id)

    def destroy(self, handle: SessionHandle) -> str:
        if handle.id:
            self._store.pop(handle.id, None)
        handle.data.clear()
        return self.build_cookie("", max_age=0)

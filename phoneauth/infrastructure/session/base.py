from http.cookies import SimpleCookie
from typing import Any, Optional

from starlette.requests import cookie_parser

from ...application.ports.session_store import SessionHandle
from ...config import settings


class CookieSessionStoreBase:
    """Shared cookie plumbing for the session stores."""

    def __init__(self, cookie_name: Optional[str] = None, max_age: Optional[int] = None,
                 path: Optional[str] = None, secure: Optional[bool] = None,
                 samesite: Optional[str] = None, httponly: bool = True) -> None:
        self.cookie_name = cookie_name or settings.SESSION_COOKIE_NAME
        self.max_age = max_age if max_age is not None else settings.SESSION_MAX_AGE_SECONDS
        self.path = path or settings.SESSION_COOKIE_PATH
        self.secure = settings.SESSION_COOKIE_SECURE if secure is None else secure
        self.samesite = samesite or settings.SESSION_COOKIE_SAMESITE
        self.httponly = httponly

    def set(self, handle: SessionHandle, key: str, value: Any) -> None:
        handle.set(key, value)

    def flash(self, handle: SessionHandle, key: str, value: Any) -> None:
        handle.flash(key, value)

    def unset(self, handle: SessionHandle, key: str) -> None:
        handle.unset(key)

    def read_cookie(self, cookie_header: Optional[str]) -> Optional[str]:
        if not cookie_header:
            return None
        # tolerant of malformed neighbouring cookies
        return cookie_parser(cookie_header).get(self.cookie_name) or None

    def build_cookie(self, value: str, max_age: Optional[int] = None) -> str:
        jar = SimpleCookie()
        jar[self.cookie_name] = value
        morsel = jar[self.cookie_name]
        morsel["path"] = self.path
        morsel["max-age"] = self.max_age if max_age is None else max_age
        morsel["samesite"] = self.samesite
        if self.httponly:
            morsel["httponly"] = True
        if self.secure:
            morsel["secure"] = True
        return morsel.OutputString()

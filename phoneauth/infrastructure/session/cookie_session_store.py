import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from ...application.ports.session_store import SessionHandle
from ...config import settings
from .base import CookieSessionStoreBase

logger = logging.getLogger(__name__)


class SignedCookieSessionStore(CookieSessionStoreBase):
    """Keeps the whole session inside one HS256-signed cookie."""

    def __init__(self, secret_key: Optional[str] = None, algorithm: Optional[str] = None, **cookie_options) -> None:
        super().__init__(**cookie_options)
        self.secret_key = secret_key or settings.SECRET_KEY
        self.algorithm = algorithm or settings.ALGORITHM

    def get(self, cookie_header: Optional[str]) -> SessionHandle:
        token = self.read_cookie(cookie_header)
        if not token:
            return SessionHandle()
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            logger.info("Session cookie expired, starting a fresh session")
            return SessionHandle()
        except jwt.InvalidTokenError as e:
            logger.warning(f"Discarding invalid session cookie: {e}")
            return SessionHandle()
        return SessionHandle(payload.get("data") or {})

    def persist(self, handle: SessionHandle) -> str:
        expire = datetime.now(timezone.utc) + timedelta(seconds=self.max_age)
        token = jwt.encode({"data": handle.data, "exp": expire}, self.secret_key, algorithm=self.algorithm)
        return self.build_cookie(token)

    def destroy(self, handle: SessionHandle) -> str:
        handle.data.clear()
        return self.build_cookie("", max_age=0)

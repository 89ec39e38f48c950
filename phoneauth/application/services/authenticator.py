import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from ..ports.session_store import SessionStore
from .phone_strategy import PhoneVerificationStrategy
from .results import AuthenticateOptions, AuthResult, Redirect

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlashState:
    """Flashed values for the login UI; ``cookie`` must be sent back since reading consumed them."""

    pending_phone: Optional[str]
    error: Optional[str]
    cookie: str


class Authenticator:
    def __init__(self, session_store: SessionStore, session_key: str = "user",
                 session_error_key: str = "auth:error"):
        self.session_store = session_store
        self.session_key = session_key
        self.session_error_key = session_error_key
        self._strategies: Dict[str, PhoneVerificationStrategy] = {}

    def use(self, strategy: PhoneVerificationStrategy, name: Optional[str] = None) -> "Authenticator":
        self._strategies[name or strategy.name] = strategy
        return self

    def unuse(self, name: str) -> "Authenticator":
        self._strategies.pop(name, None)
        return self

    def authenticate(self, strategy: str, request: Any, form: Mapping[str, Any],
                     success_redirect: Optional[str] = None,
                     failure_redirect: Optional[str] = None) -> AuthResult:
        if strategy not in self._strategies:
            raise KeyError(f"Strategy {strategy} not found.")
        options = AuthenticateOptions(
            success_redirect=success_redirect,
            failure_redirect=failure_redirect,
            session_key=self.session_key,
            session_error_key=self.session_error_key,
        )
        return self._strategies[strategy].authenticate(request, form, self.session_store, options)

    def is_authenticated(self, request: Any, success_redirect: Optional[str] = None,
                         failure_redirect: Optional[str] = None) -> Union[Any, Redirect, None]:
        session = self.session_store.get(request.headers.get("cookie"))
        principal = session.peek(self.session_key)
        if principal is not None and success_redirect:
            return Redirect(success_redirect)
        if principal is None and failure_redirect:
            return Redirect(failure_redirect)
        return principal

    def logout(self, request: Any, redirect_to: str) -> Redirect:
        session = self.session_store.get(request.headers.get("cookie"))
        logger.info("Destroying session on logout")
        return Redirect(redirect_to, self.session_store.destroy(session))

    def read_flashes(self, request: Any) -> FlashState:
        session = self.session_store.get(request.headers.get("cookie"))
        pending_phone = session.get(PhoneVerificationStrategy.session_phone_key)
        error = session.get(self.session_error_key)
        if isinstance(error, dict):
            error = error.get("message")
        return FlashState(
            pending_phone=pending_phone,
            error=error,
            cookie=self.session_store.persist(session),
        )

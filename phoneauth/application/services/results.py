from dataclasses import dataclass, field
from typing import Any, Optional, Union


@dataclass(frozen=True)
class Redirect:
    target: str
    cookie: Optional[str] = None


@dataclass(frozen=True)
class Authenticated:
    principal: Any


@dataclass(frozen=True)
class Failed:
    kind: str
    message: str
    cookie: Optional[str] = None
    error: Optional[BaseException] = field(default=None, compare=False)

    def raise_error(self) -> None:
        """Re-raise the failure as the exception that caused it."""
        if self.error is not None:
            raise self.error
        raise RuntimeError(self.message)


AuthResult = Union[Redirect, Authenticated, Failed]


@dataclass
class AuthenticateOptions:
    success_redirect: Optional[str] = None
    failure_redirect: Optional[str] = None
    session_key: str = "user"
    session_error_key: str = "auth:error"

"""Pure decision logic for one phone verification transition.

The session snapshot is turned into an explicit state once per request and
``plan`` maps ``(state, submission)`` to the single step the strategy has to
execute. Nothing in this module touches the network or cookies.
"""
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from ...exceptions import AuthError, InvalidPhoneNumber, MissingPhoneNumber
from ..ports.session_store import SessionHandle


# States

@dataclass(frozen=True)
class NoPendingVerification:
    pass


@dataclass(frozen=True)
class AwaitingCode:
    """A code was sent to ``phone`` on the previous request."""

    phone: str


@dataclass(frozen=True)
class AlreadyAuthenticated:
    principal: Any


State = Union[NoPendingVerification, AwaitingCode, AlreadyAuthenticated]


def derive_state(session: SessionHandle, session_key: str, phone_key: str) -> State:
    """Read the state without consuming any flashed value."""
    principal = session.peek(session_key)
    if principal is not None:
        return AlreadyAuthenticated(principal)
    pending = session.peek(phone_key)
    if pending:
        return AwaitingCode(pending)
    return NoPendingVerification()


# Input

@dataclass(frozen=True)
class Submission:
    phone: Optional[str] = None
    code: Optional[str] = None

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "Submission":
        return cls(phone=_field(form, "phone"), code=_field(form, "code"))


def _field(form: Mapping[str, Any], name: str) -> Optional[str]:
    value = form.get(name)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


# Steps

@dataclass(frozen=True)
class ReturnPrincipal:
    principal: Any


@dataclass(frozen=True)
class SendCode:
    phone: str
    # a code was already sent to this number; the provider issues a new one
    resend: bool = False


@dataclass(frozen=True)
class CheckCode:
    phone: str
    code: str
    # the number matches the one the pending code was sent to
    resumed: bool = False


@dataclass(frozen=True)
class Reject:
    error: AuthError


Step = Union[ReturnPrincipal, SendCode, CheckCode, Reject]


def plan(state: State, submission: Submission, format_phone: Callable[[str], str]) -> Step:
    if isinstance(state, AlreadyAuthenticated):
        return ReturnPrincipal(state.principal)

    if submission.phone is None:
        return Reject(MissingPhoneNumber())
    try:
        phone = format_phone(submission.phone)
    except InvalidPhoneNumber as e:
        return Reject(e)
    except ValueError as e:
        # custom formatters may signal bad input with a plain ValueError
        return Reject(InvalidPhoneNumber(str(e) or None, cause=e))
    if not phone:
        return Reject(InvalidPhoneNumber())

    pending = state.phone if isinstance(state, AwaitingCode) else None
    if submission.code is not None:
        return CheckCode(phone, submission.code, resumed=pending == phone)
    return SendCode(phone, resend=pending == phone)

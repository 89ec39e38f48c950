import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from ...exceptions import (
    AuthError,
    AuthorizationError,
    DeliveryFailed,
    InvalidCode,
    InvalidPhoneNumber,
    MissingSuccessRedirect,
)
from ..ports.audit_logger import AuditLogger
from ..ports.phone_formatter import PhoneFormatter
from ..ports.session_store import SessionHandle, SessionStore
from ..ports.verification_provider import VerificationOutcome, VerificationProvider
from .results import AuthenticateOptions, Authenticated, AuthResult, Failed, Redirect
from .state_machine import (
    AlreadyAuthenticated,
    CheckCode,
    Reject,
    ReturnPrincipal,
    SendCode,
    Submission,
    derive_state,
    plan,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifyParams:
    """Arguments handed to the integrator's verify callback."""

    phone: str
    form_data: Mapping[str, Any]
    request: Any


VerifyCallback = Callable[[VerifyParams], Any]
SendCodeFunction = Callable[[str], None]
ValidateCodeFunction = Callable[[str, str], VerificationOutcome]
FormatPhoneNumberFunction = Callable[[str], str]


class PhoneVerificationStrategy:
    """Two-step phone login: submit a phone to get a code, submit the code to sign in.

    Each call to ``authenticate`` performs one transition and issues at most
    one provider call. ``send_code``, ``validate_code`` and
    ``format_phone_number`` replace the matching provider or formatter
    operation when given.
    """

    name = "phone"
    session_phone_key = "twilio:phone"

    def __init__(
        self,
        verify: VerifyCallback,
        provider: Optional[VerificationProvider] = None,
        formatter: Optional[PhoneFormatter] = None,
        send_code: Optional[SendCodeFunction] = None,
        validate_code: Optional[ValidateCodeFunction] = None,
        format_phone_number: Optional[FormatPhoneNumberFunction] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        if provider is None and (send_code is None or validate_code is None):
            raise ValueError("Either a provider or both send_code and validate_code are required")
        if formatter is None and format_phone_number is None:
            from ...infrastructure.phone.default_formatter import DefaultPhoneFormatter
            formatter = DefaultPhoneFormatter()

        self.verify = verify
        self.send_code = send_code or provider.request_code
        self.validate_code = validate_code or provider.check_code
        self.format_phone_number = format_phone_number or formatter.format
        self.audit_logger = audit_logger

    def authenticate(
        self,
        request: Any,
        form: Mapping[str, Any],
        session_store: SessionStore,
        options: AuthenticateOptions,
    ) -> AuthResult:
        session = session_store.get(request.headers.get("cookie"))
        state = derive_state(session, options.session_key, self.session_phone_key)
        if isinstance(state, AlreadyAuthenticated):
            return Authenticated(state.principal)

        if not options.success_redirect:
            raise MissingSuccessRedirect()

        submission = Submission.from_form(form)
        try:
            step = plan(state, submission, self.format_phone_number)
        except Exception as e:
            logger.error(f"Phone formatter failed: {e!r}")
            return self._failure(InvalidPhoneNumber(cause=e), session, session_store, options)

        if isinstance(step, ReturnPrincipal):
            return Authenticated(step.principal)

        if isinstance(step, Reject):
            return self._failure(step.error, session, session_store, options)

        if isinstance(step, CheckCode):
            return self._check_code(step, form, request, session, session_store, options)

        if isinstance(step, SendCode):
            return self._send_code(step, session, session_store, options)

        raise TypeError(f"Unhandled step: {step!r}")

    def _send_code(self, step: SendCode, session: SessionHandle, session_store: SessionStore,
                   options: AuthenticateOptions) -> AuthResult:
        details = {"transition": "send_code", "resend": step.resend}
        try:
            self.send_code(step.phone)
        except DeliveryFailed as e:
            return self._failure(e, session, session_store, options, phone=step.phone, details=details)
        except Exception as e:
            logger.error(f"send_code failed: {e!r}")
            error = DeliveryFailed(str(e) or None, cause=e)
            return self._failure(error, session, session_store, options, phone=step.phone, details=details)
        self._audit("code_requested", step.phone, details=details)

        session_store.flash(session, self.session_phone_key, step.phone)
        session_store.unset(session, options.session_error_key)
        return Redirect(options.success_redirect, session_store.persist(session))

    def _check_code(self, step: CheckCode, form: Mapping[str, Any], request: Any, session: SessionHandle,
                    session_store: SessionStore, options: AuthenticateOptions) -> AuthResult:
        details = {"transition": "check_code", "resumed": step.resumed}
        try:
            outcome = self.validate_code(step.phone, step.code)
        except DeliveryFailed as e:
            outcome = VerificationOutcome.PROVIDER_ERROR
            error: AuthError = e
        except Exception as e:
            logger.error(f"validate_code failed: {e!r}")
            outcome = VerificationOutcome.PROVIDER_ERROR
            error = DeliveryFailed(str(e) or None, cause=e)
        else:
            error = DeliveryFailed() if outcome is VerificationOutcome.PROVIDER_ERROR else InvalidCode()
        details["outcome"] = outcome.value

        if outcome is not VerificationOutcome.APPROVED:
            # keep the user on the code step for the same number
            session_store.flash(session, self.session_phone_key, step.phone)
            return self._failure(error, session, session_store, options, phone=step.phone, details=details)

        try:
            principal = self.verify(VerifyParams(phone=step.phone, form_data=form, request=request))
        except Exception as e:
            logger.warning(f"verify callback rejected the user: {e}")
            return self._failure(e, session, session_store, options, phone=step.phone, details=details)
        self._audit("authenticated", step.phone, details=details)

        session_store.set(session, options.session_key, principal)
        session_store.unset(session, self.session_phone_key)
        session_store.unset(session, options.session_error_key)
        return Redirect(options.success_redirect, session_store.persist(session))

    def _failure(self, error: BaseException, session: SessionHandle, session_store: SessionStore,
                 options: AuthenticateOptions, phone: Optional[str] = None,
                 details: Optional[dict] = None) -> AuthResult:
        if isinstance(error, AuthError):
            kind, message = error.kind, error.message
        else:
            kind, message = AuthorizationError.kind, str(error) or "Unknown Error."
        logger.info(f"Phone authentication failed: {kind}")
        self._audit("authentication_failed", phone, success=False, details={**(details or {}), "kind": kind})

        session_store.flash(session, options.session_error_key, {"message": message})
        cookie = session_store.persist(session)
        if options.failure_redirect:
            return Redirect(options.failure_redirect, cookie)
        return Failed(kind=kind, message=message, cookie=cookie, error=error)

    def _audit(self, action: str, phone: Optional[str], success: bool = True,
               details: Optional[dict] = None) -> None:
        if self.audit_logger is not None:
            self.audit_logger.log(action, phone, success=success, details=details)

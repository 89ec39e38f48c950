from .phone_formatter import PhoneFormatter
from .verification_provider import VerificationOutcome, VerificationProvider
from .session_store import SessionHandle, SessionStore
from .audit_logger import AuditLogger

__all__ = [
    "PhoneFormatter",
    "VerificationOutcome",
    "VerificationProvider",
    "SessionHandle",
    "SessionStore",
    "AuditLogger",
]

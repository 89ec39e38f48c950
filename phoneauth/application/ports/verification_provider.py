from enum import Enum
from typing import Protocol


class VerificationOutcome(str, Enum):
    APPROVED = "approved"
    REJECTED = "rejected"
    PROVIDER_ERROR = "provider_error"


class VerificationProvider(Protocol):
    def request_code(self, phone: str) -> None:
        ...

    def check_code(self, phone: str, code: str) -> VerificationOutcome:
        ...

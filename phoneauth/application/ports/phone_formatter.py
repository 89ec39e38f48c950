from typing import Protocol


class PhoneFormatter(Protocol):
    def format(self, raw: str) -> str:
        """Return the canonical E.164 identifier or raise InvalidPhoneNumber."""
        ...

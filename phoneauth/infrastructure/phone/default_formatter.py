import re
from typing import Optional

import phonenumbers
from phonenumbers import NumberParseException, PhoneNumberFormat

from ...config import settings
from ...exceptions import InvalidPhoneNumber

# digits with the separators people type between groups, optional leading +
_ALLOWED_RE = re.compile(r"^\+?[\d\s\-.()/]+$")
_NANP_COUNTRY_CODE = 1
# NANP area codes (NPA) never start with 0 or 1
_NANP_AREA_CODE_RE = re.compile(r"^[2-9]\d{9}$")


class DefaultPhoneFormatter:
    """Normalize user input into an E.164 phone identifier.

    Numbers are parsed with ``phonenumbers`` against the region of
    ``default_country_code`` and must be valid for their country. NANP
    numbers that are not in the allocation metadata (the 555 range) are
    accepted when they have the right length and a well-formed area code.
    """

    def __init__(self, default_country_code: Optional[str] = None) -> None:
        code = (default_country_code or settings.DEFAULT_COUNTRY_CODE).lstrip("+")
        region = phonenumbers.region_code_for_country_code(int(code)) if code.isdigit() else None
        if not region or region == phonenumbers.UNKNOWN_REGION:
            raise ValueError(f"Invalid default country code: {default_country_code!r}")
        self.default_country_code = code
        self.region = region

    def format(self, raw: str) -> str:
        text = (raw or "").strip()
        if not text or not _ALLOWED_RE.match(text):
            raise InvalidPhoneNumber()
        if text.startswith("00"):
            text = "+" + text[2:]

        try:
            number = phonenumbers.parse(text, self.region)
        except NumberParseException as e:
            raise InvalidPhoneNumber(cause=e) from e

        if not self._is_deliverable(number):
            raise InvalidPhoneNumber()
        return phonenumbers.format_number(number, PhoneNumberFormat.E164)

    __call__ = format

    def _is_deliverable(self, number: phonenumbers.PhoneNumber) -> bool:
        if phonenumbers.is_valid_number(number):
            return True
        if number.country_code != _NANP_COUNTRY_CODE:
            return False
        return (
            phonenumbers.is_possible_number(number)
            and _NANP_AREA_CODE_RE.match(str(number.national_number)) is not None
        )

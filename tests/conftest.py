import pytest

from phoneauth.application.ports.verification_provider import VerificationOutcome
from phoneauth.exceptions import DeliveryFailed
from phoneauth.infrastructure.session import InMemorySessionStore


class FakeProvider:
    def __init__(self, outcome=VerificationOutcome.APPROVED, fail_send=False, fail_check=False):
        self.outcome = outcome
        self.fail_send = fail_send
        self.fail_check = fail_check
        self.sent = []
        self.checked = []

    def request_code(self, phone):
        self.sent.append(phone)
        if self.fail_send:
            raise DeliveryFailed("Quota exceeded")

    def check_code(self, phone, code):
        self.checked.append((phone, code))
        if self.fail_check:
            raise DeliveryFailed()
        return self.outcome


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def store():
    return InMemorySessionStore()


@pytest.fixture
def provider_factory():
    return FakeProvider

import pytest
from twilio.base.exceptions import TwilioException, TwilioRestException

from phoneauth.application.ports.verification_provider import VerificationOutcome
from phoneauth.exceptions import DeliveryFailed
from phoneauth.infrastructure.otp.twilio_provider import TwilioVerifyProvider


class FakeResource:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.result


class FakeInstance:
    def __init__(self, sid="VE123", status="pending"):
        self.sid = sid
        self.status = status


class FakeService:
    def __init__(self, verifications, verification_checks):
        self.verifications = verifications
        self.verification_checks = verification_checks


class FakeClient:
    def __init__(self, verifications=None, checks=None):
        self.service = FakeService(verifications or FakeResource(FakeInstance()), checks or FakeResource(FakeInstance()))
        self.requested_sids = []
        self.verify = self
        self.v2 = self

    def services(self, sid):
        self.requested_sids.append(sid)
        return self.service


def make_provider(client):
    return TwilioVerifyProvider(client=client, service_sid="VA123", channel="sms")


def test_request_code_creates_verification():
    client = FakeClient()
    make_provider(client).request_code("+15551234567")
    assert client.requested_sids == ["VA123"]
    assert client.service.verifications.calls == [{"to": "+15551234567", "channel": "sms"}]


def test_request_code_rest_error_is_delivery_failure():
    error = TwilioRestException(429, "https://verify.twilio.com", msg="Max send attempts reached", code=60203)
    client = FakeClient(verifications=FakeResource(error=error))
    with pytest.raises(DeliveryFailed) as exc:
        make_provider(client).request_code("+15551234567")
    assert exc.value.cause is error


def test_request_code_network_error_is_delivery_failure():
    client = FakeClient(verifications=FakeResource(error=ConnectionError("connection reset")))
    with pytest.raises(DeliveryFailed):
        make_provider(client).request_code("+15551234567")


@pytest.mark.parametrize("status,outcome", [
    ("approved", VerificationOutcome.APPROVED),
    ("pending", VerificationOutcome.REJECTED),
    ("canceled", VerificationOutcome.REJECTED),
])
def test_check_code_maps_status(status, outcome):
    client = FakeClient(checks=FakeResource(FakeInstance(status=status)))
    assert make_provider(client).check_code("+15551234567", "123456") is outcome
    assert client.service.verification_checks.calls == [{"to": "+15551234567", "code": "123456"}]


def test_check_code_missing_verification_is_rejected():
    error = TwilioRestException(404, "https://verify.twilio.com", msg="The requested resource was not found", code=20404)
    client = FakeClient(checks=FakeResource(error=error))
    assert make_provider(client).check_code("+15551234567", "123456") is VerificationOutcome.REJECTED


def test_check_code_other_rest_error_is_provider_error():
    error = TwilioRestException(500, "https://verify.twilio.com", msg="Internal error")
    client = FakeClient(checks=FakeResource(error=error))
    assert make_provider(client).check_code("+15551234567", "123456") is VerificationOutcome.PROVIDER_ERROR


def test_check_code_transport_error_raises():
    client = FakeClient(checks=FakeResource(error=TwilioException("unreachable")))
    with pytest.raises(DeliveryFailed):
        make_provider(client).check_code("+15551234567", "123456")


def test_missing_service_sid_is_delivery_failure(monkeypatch):
    from phoneauth.infrastructure.otp import twilio_provider as mod
    monkeypatch.setattr(mod.settings, "TWILIO_VERIFY_SERVICE_SID", "")
    provider = TwilioVerifyProvider(client=FakeClient())
    with pytest.raises(DeliveryFailed):
        provider.request_code("+15551234567")
    with pytest.raises(DeliveryFailed):
        provider.check_code("+15551234567", "123456")

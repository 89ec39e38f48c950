import logging
from typing import Optional

from twilio.base.exceptions import TwilioException, TwilioRestException
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client

from ...application.ports.verification_provider import VerificationOutcome, VerificationProvider
from ...config import settings
from ...exceptions import DeliveryFailed

logger = logging.getLogger(__name__)

# Twilio answers 404 when no pending verification exists (expired, already approved)
_NOT_FOUND = 404


class TwilioVerifyProvider(VerificationProvider):
    """Verification provider backed by the Twilio Verify v2 API.

    Twilio owns code generation, delivery and expiry; this adapter only maps
    its responses and errors onto ``VerificationOutcome`` and ``DeliveryFailed``.
    """

    def __init__(self, client: Optional[Client] = None, service_sid: Optional[str] = None,
                 channel: Optional[str] = None):
        if client is None:
            http_client = TwilioHttpClient(timeout=settings.TWILIO_TIMEOUT_SECONDS)
            client = Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN, http_client=http_client)
        self.client = client
        self.verify_sid = service_sid or settings.TWILIO_VERIFY_SERVICE_SID
        self.channel = channel or settings.TWILIO_CHANNEL

    def _service(self):
        if not self.verify_sid:
            logger.error("Twilio Verify Service SID not configured")
            raise DeliveryFailed("Phone verification is not configured.")
        return self.client.verify.v2.services(self.verify_sid)

    def request_code(self, phone: str) -> None:
        try:
            verification = self._service().verifications.create(to=phone, channel=self.channel)
        except TwilioRestException as e:
            logger.error(f"Twilio rejected verification request: status={e.status} code={e.code} msg={e.msg}")
            raise DeliveryFailed(cause=e) from e
        except (TwilioException, OSError) as e:
            logger.error(f"Twilio verification request failed: {e}")
            raise DeliveryFailed(cause=e) from e
        logger.info(f"Verification {verification.sid} sent via {self.channel}")

    def check_code(self, phone: str, code: str) -> VerificationOutcome:
        try:
            check = self._service().verification_checks.create(to=phone, code=code)
        except TwilioRestException as e:
            if e.status == _NOT_FOUND:
                logger.info("No pending verification for this number, treating code as rejected")
                return VerificationOutcome.REJECTED
            logger.error(f"Twilio verification check error: status={e.status} code={e.code} msg={e.msg}")
            return VerificationOutcome.PROVIDER_ERROR
        except (TwilioException, OSError) as e:
            logger.error(f"Twilio verification check failed: {e}")
            raise DeliveryFailed(cause=e) from e
        if check.status == "approved":
            return VerificationOutcome.APPROVED
        return VerificationOutcome.REJECTED

import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException

# Load environment variables as early as possible
load_dotenv()

from .application.ports import PhoneFormatter, SessionStore, VerificationProvider
from .application.services import Authenticator, PhoneVerificationStrategy, VerifyParams
from .application.services.phone_strategy import VerifyCallback
from .config import Settings, settings as default_settings
from .exceptions import http_exception_handler
from .infrastructure.audit.std_logger import StdAuditLogger
from .infrastructure.phone.default_formatter import DefaultPhoneFormatter
from .infrastructure.session import SignedCookieSessionStore
from .routers import auth_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=settings.LOG_FORMAT
    )


def default_verify(params: VerifyParams) -> dict:
    return {"phone": params.phone}


def create_app(
    verify: Optional[VerifyCallback] = None,
    provider: Optional[VerificationProvider] = None,
    session_store: Optional[SessionStore] = None,
    formatter: Optional[PhoneFormatter] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings)

    if provider is None:
        from .infrastructure.otp.twilio_provider import TwilioVerifyProvider
        provider = TwilioVerifyProvider()

    strategy = PhoneVerificationStrategy(
        verify=verify or default_verify,
        provider=provider,
        formatter=formatter or DefaultPhoneFormatter(settings.DEFAULT_COUNTRY_CODE),
        audit_logger=StdAuditLogger(),
    )
    authenticator = Authenticator(session_store or SignedCookieSessionStore(secret_key=settings.SECRET_KEY))
    authenticator.use(strategy)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.APP_NAME}...")
        if settings.SECRET_KEY == "change-me-in-prod" and not settings.DEBUG:
            logger.warning("SESSION_SECRET_KEY is not set; session cookies use the default key")
        yield
        logger.info(f"Shutting down {settings.APP_NAME}...")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.authenticator = authenticator
    app.state.success_redirect = settings.SUCCESS_REDIRECT
    app.state.failure_redirect = settings.FAILURE_REDIRECT

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.include_router(auth_router.router)
    return app

#config.py
import os
from pydantic_settings import BaseSettings
from pydantic import Field
from pydantic_settings import SettingsConfigDict
from typing import Optional
from functools import lru_cache

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, populate_by_name=True)
    # Application Settings
    APP_NAME: str = "Phone Auth API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Session cookie settings
    SECRET_KEY: str = Field(default="change-me-in-prod", alias="SESSION_SECRET_KEY")
    ALGORITHM: str = "HS256"
    SESSION_COOKIE_NAME: str = "_session"
    SESSION_MAX_AGE_SECONDS: int = 60 * 60 * 24 * 30  # 30 days
    SESSION_COOKIE_SECURE: bool = False
    SESSION_COOKIE_SAMESITE: str = "lax"
    SESSION_COOKIE_PATH: str = "/"

    # Twilio Settings
    TWILIO_ACCOUNT_SID: str = os.environ.get("TWILIO_ACCOUNT_SID", "")
    TWILIO_AUTH_TOKEN: str = os.environ.get("TWILIO_AUTH_TOKEN", "")
    TWILIO_VERIFY_SERVICE_SID: str = os.environ.get("TWILIO_VERIFY_SERVICE_SID", "")
    TWILIO_CHANNEL: str = "sms"
    TWILIO_TIMEOUT_SECONDS: int = 15

    # Phone formatting
    DEFAULT_COUNTRY_CODE: str = "1"

    # Redirect targets
    SUCCESS_REDIRECT: str = "/login"
    FAILURE_REDIRECT: Optional[str] = None

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings: Settings = get_settings()

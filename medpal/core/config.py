from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from enum import Enum

# Used only when SECRET_KEY is missing; tokens signed with it are forgeable.
INSECURE_DEFAULT_SECRET_KEY = "medpal-insecure-default-secret-key"


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", case_sensitive=True)

    # Environment Configuration
    ENVIRONMENT: Environment = Environment.DEVELOPMENT

    # Project Information
    PROJECT_NAME: str = "MedPal"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"

    # Security
    SECRET_KEY: Optional[str] = None
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    DEFAULT_MEMBERSHIP_TYPE: str = "Gold Member"

    # Timezone configuration (used for user-facing timestamps)
    DEFAULT_TIMEZONE: str = "UTC"

    # Twilio SMS (all optional; SMS degrades to "not configured" without them)
    TWILIO_ACCOUNT_SID: Optional[str] = None
    TWILIO_AUTH_TOKEN: Optional[str] = None
    TWILIO_PHONE_NUMBER: Optional[str] = None

    # SMTP email (all optional; email degrades to "not configured" without them)
    SMTP_SERVER: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    FROM_EMAIL: Optional[str] = None

    # Metrics
    METRICS_ENABLED: bool = True

    @field_validator(
        "SECRET_KEY",
        "TWILIO_ACCOUNT_SID",
        "TWILIO_AUTH_TOKEN",
        "TWILIO_PHONE_NUMBER",
        "SMTP_SERVER",
        "SMTP_USERNAME",
        "SMTP_PASSWORD",
        "FROM_EMAIL",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        # Blank env entries in .env files mean "not configured"
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    @property
    def sms_configured(self) -> bool:
        return bool(self.TWILIO_ACCOUNT_SID and self.TWILIO_AUTH_TOKEN and self.TWILIO_PHONE_NUMBER)

    @property
    def email_configured(self) -> bool:
        return bool(self.SMTP_SERVER and self.SMTP_USERNAME and self.SMTP_PASSWORD)

    @property
    def sender_email(self) -> Optional[str]:
        """Address used in the From header; falls back to the SMTP login."""
        return self.FROM_EMAIL or self.SMTP_USERNAME


@lru_cache()
def get_settings() -> Settings:
    return Settings()

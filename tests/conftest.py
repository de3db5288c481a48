"""Shared fixtures for the MedPal test suite.

Transports are replaced by in-process fakes that record every call, so no
test talks to Twilio or an SMTP server.
"""

from typing import List, Optional, Tuple

import pytest

from medpal.container import Services, build_services
from medpal.core.config import Settings
from medpal.core.security import PasswordHasher, TokenService
from medpal.crud.user import InMemoryUserStore
from medpal.services.email_service import EmailSender, EmailTransport
from medpal.services.sms_service import SMSSender, SMSTransport

TEST_SECRET_KEY = "test-secret-key-for-medpal"


class FakeSMSTransport(SMSTransport):
    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.sent: List[Tuple[str, str]] = []

    def send(self, to: str, body: str) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((to, body))


class FakeEmailTransport(EmailTransport):
    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.sent: List[Tuple[str, str, str]] = []

    def send(self, to: str, subject: str, html: str) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((to, subject, html))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        SECRET_KEY=TEST_SECRET_KEY,
        DEFAULT_TIMEZONE="UTC",
        TWILIO_ACCOUNT_SID=None,
        TWILIO_AUTH_TOKEN=None,
        TWILIO_PHONE_NUMBER=None,
        SMTP_SERVER=None,
        SMTP_USERNAME=None,
        SMTP_PASSWORD=None,
        FROM_EMAIL=None,
    )


@pytest.fixture
def fast_hasher() -> PasswordHasher:
    """Minimum bcrypt cost so service tests stay quick."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens(settings: Settings) -> TokenService:
    return TokenService(settings)


@pytest.fixture
def store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def sms_transport() -> FakeSMSTransport:
    return FakeSMSTransport()


@pytest.fixture
def email_transport() -> FakeEmailTransport:
    return FakeEmailTransport()


@pytest.fixture
def sms_sender(sms_transport: FakeSMSTransport) -> SMSSender:
    return SMSSender(sms_transport)


@pytest.fixture
def email_sender(email_transport: FakeEmailTransport) -> EmailSender:
    return EmailSender(email_transport)


@pytest.fixture
def services(
    settings: Settings,
    store: InMemoryUserStore,
    sms_transport: FakeSMSTransport,
    email_transport: FakeEmailTransport,
    fast_hasher: PasswordHasher,
) -> Services:
    return build_services(settings, store, sms_transport, email_transport, hasher=fast_hasher)


@pytest.fixture
def registration() -> dict:
    return {
        "name": "A",
        "email": "a@x.com",
        "phone": "+15551234567",
        "password": "pw",
    }

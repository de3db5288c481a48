from dataclasses import dataclass
from typing import Optional

from medpal.core.auth_service import AuthService
from medpal.core.config import Settings
from medpal.core.security import PasswordHasher, TokenService
from medpal.crud.user import InMemoryUserStore, UserStore
from medpal.reminders.dispatcher import NotificationDispatcher
from medpal.services.email_service import EmailSender, EmailTransport, build_email_transport
from medpal.services.otp_service import OTPService
from medpal.services.sms_service import SMSSender, SMSTransport, build_sms_transport


@dataclass(frozen=True)
class Services:
    """Everything the API layer needs, wired once at process start."""

    settings: Settings
    auth: AuthService
    tokens: TokenService
    dispatcher: NotificationDispatcher
    otp: OTPService


def build_services(
    settings: Settings,
    store: UserStore,
    sms_transport: Optional[SMSTransport],
    email_transport: Optional[EmailTransport],
    hasher: Optional[PasswordHasher] = None,
) -> Services:
    tokens = TokenService(settings)
    sms_sender = SMSSender(sms_transport)
    email_sender = EmailSender(email_transport)
    return Services(
        settings=settings,
        auth=AuthService(store, hasher or PasswordHasher(), tokens, settings),
        tokens=tokens,
        dispatcher=NotificationDispatcher(sms_sender, email_sender, settings),
        otp=OTPService(sms_sender),
    )


def services_from_settings(settings: Settings, store: Optional[UserStore] = None) -> Services:
    """Build real transports from settings; missing credentials disable a channel."""
    return build_services(
        settings,
        store or InMemoryUserStore(),
        build_sms_transport(settings),
        build_email_transport(settings),
    )

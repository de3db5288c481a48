import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

from twilio.rest import Client

from medpal.core.config import Settings
from medpal.reminders.metrics import notifications_failed_total, notifications_sent_total
from medpal.schemas.notifications import DeliveryChannel, DeliveryResult

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "SMS transport not configured"


class SMSTransport(ABC):
    """Raw SMS provider. ``send`` blocks and raises on any provider error."""

    @abstractmethod
    def send(self, to: str, body: str) -> None:
        ...


class TwilioSMSTransport(SMSTransport):
    def __init__(self, account_sid: str, auth_token: str, from_number: str):
        self.client = Client(account_sid, auth_token)
        self.from_number = from_number

    def send(self, to: str, body: str) -> None:
        self.client.messages.create(body=body, from_=self.from_number, to=to)


def build_sms_transport(settings: Settings) -> Optional[SMSTransport]:
    if not settings.sms_configured:
        logger.warning("⚠️ Twilio credentials not set - SMS notifications are disabled")
        return None
    return TwilioSMSTransport(
        settings.TWILIO_ACCOUNT_SID,
        settings.TWILIO_AUTH_TOKEN,
        settings.TWILIO_PHONE_NUMBER,
    )


def normalize_phone(phone: str) -> str:
    phone = phone.strip()
    return phone if phone.startswith("+") else f"+{phone}"


def mask_phone(phone: str) -> str:
    if len(phone) <= 4:
        return phone
    return f"{phone[:-4]}XXXX"


class SMSSender:
    """Sends one SMS and reports the outcome as a ``DeliveryResult``. Never raises."""

    def __init__(self, transport: Optional[SMSTransport]):
        self.transport = transport

    @property
    def configured(self) -> bool:
        return self.transport is not None

    async def send(self, phone: str, body: str) -> DeliveryResult:
        if self.transport is None:
            notifications_failed_total.labels(channel="sms", outcome="not_configured").inc()
            return DeliveryResult.not_configured(DeliveryChannel.SMS, NOT_CONFIGURED_MESSAGE)

        to = normalize_phone(phone)
        try:
            await asyncio.to_thread(self.transport.send, to, body)
        except Exception as e:
            logger.error(f"❌ SMS to {mask_phone(to)} failed: {e!r}")
            notifications_failed_total.labels(channel="sms", outcome="transport_failure").inc()
            return DeliveryResult.failed(DeliveryChannel.SMS, str(e) or "Failed to send SMS")

        logger.info(f"✅ SMS sent to {mask_phone(to)}")
        notifications_sent_total.labels(channel="sms").inc()
        return DeliveryResult.delivered(DeliveryChannel.SMS, "SMS sent successfully")

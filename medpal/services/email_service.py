import asyncio
import logging
import smtplib
import ssl
from abc import ABC, abstractmethod
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from medpal.core.config import Settings
from medpal.reminders.metrics import notifications_failed_total, notifications_sent_total
from medpal.schemas.notifications import DeliveryChannel, DeliveryResult

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "Email transport not configured"


class EmailTransport(ABC):
    """Raw email provider. ``send`` blocks and raises on any delivery error."""

    @abstractmethod
    def send(self, to: str, subject: str, html: str) -> None:
        ...


class SMTPEmailTransport(EmailTransport):
    def __init__(self, smtp_server: str, smtp_port: int, username: str, password: str, from_email: str):
        self.smtp_server = smtp_server
        self.smtp_port = int(smtp_port)
        self.smtp_username = username
        self.smtp_password = password
        self.from_email = from_email

    def _build_message(self, to: str, subject: str, html: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_email
        msg["To"] = to
        msg.attach(MIMEText(html, "html"))
        return msg

    def send(self, to: str, subject: str, html: str) -> None:
        msg = self._build_message(to, subject, html)
        context = ssl.create_default_context()
        if self.smtp_port == 465:
            with smtplib.SMTP_SSL(self.smtp_server, self.smtp_port, context=context) as server:
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)
        else:
            with smtplib.SMTP(self.smtp_server, self.smtp_port) as server:
                server.starttls(context=context)
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)


def build_email_transport(settings: Settings) -> Optional[EmailTransport]:
    if not settings.email_configured:
        logger.warning("⚠️ SMTP credentials not set - email notifications are disabled")
        return None
    return SMTPEmailTransport(
        settings.SMTP_SERVER,
        settings.SMTP_PORT,
        settings.SMTP_USERNAME,
        settings.SMTP_PASSWORD,
        settings.sender_email,
    )


class EmailSender:
    """Sends one HTML email and reports the outcome as a ``DeliveryResult``. Never raises."""

    def __init__(self, transport: Optional[EmailTransport]):
        self.transport = transport

    @property
    def configured(self) -> bool:
        return self.transport is not None

    async def send(self, address: str, subject: str, html: str) -> DeliveryResult:
        if self.transport is None:
            notifications_failed_total.labels(channel="email", outcome="not_configured").inc()
            return DeliveryResult.not_configured(DeliveryChannel.EMAIL, NOT_CONFIGURED_MESSAGE)

        try:
            await asyncio.to_thread(self.transport.send, address, subject, html)
        except Exception as e:
            logger.error(f"❌ Email to {address} failed: {e!r}")
            notifications_failed_total.labels(channel="email", outcome="transport_failure").inc()
            return DeliveryResult.failed(DeliveryChannel.EMAIL, str(e) or "Failed to send email")

        logger.info(f"✅ Email sent to {address}")
        notifications_sent_total.labels(channel="email").inc()
        return DeliveryResult.delivered(DeliveryChannel.EMAIL, "Email sent successfully")

"""Tests for the SMS and email channel senders and their transports."""

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from medpal.core.config import Settings
from medpal.schemas.notifications import DeliveryChannel, DeliveryOutcome
from medpal.services.email_service import (
    EmailSender,
    SMTPEmailTransport,
    build_email_transport,
)
from medpal.services.sms_service import (
    SMSSender,
    TwilioSMSTransport,
    build_sms_transport,
    mask_phone,
    normalize_phone,
)


class TestSMSSender:
    @pytest.mark.asyncio
    async def test_successful_send(self, sms_sender: SMSSender, sms_transport) -> None:
        result = await sms_sender.send("+15551234567", "hello")

        assert result.channel == DeliveryChannel.SMS
        assert result.success is True
        assert result.outcome == DeliveryOutcome.DELIVERED
        assert sms_transport.sent == [("+15551234567", "hello")]

    @pytest.mark.asyncio
    async def test_adds_leading_plus(self, sms_sender: SMSSender, sms_transport) -> None:
        await sms_sender.send("15551234567", "hello")
        assert sms_transport.sent[0][0] == "+15551234567"

    @pytest.mark.asyncio
    async def test_not_configured(self) -> None:
        result = await SMSSender(None).send("+15551234567", "hello")

        assert result.success is False
        assert result.outcome == DeliveryOutcome.NOT_CONFIGURED
        assert "not configured" in result.message

    @pytest.mark.asyncio
    async def test_transport_failure_is_a_value(self, sms_sender: SMSSender, sms_transport) -> None:
        sms_transport.error = RuntimeError("Unable to create record: invalid 'To' number")

        result = await sms_sender.send("+15551234567", "hello")

        assert result.success is False
        assert result.outcome == DeliveryOutcome.TRANSPORT_FAILURE
        assert result.message == "Unable to create record: invalid 'To' number"

    @pytest.mark.asyncio
    async def test_failure_without_text_gets_default_message(self, sms_sender: SMSSender, sms_transport) -> None:
        sms_transport.error = RuntimeError()
        result = await sms_sender.send("+1555", "hello")
        assert result.message == "Failed to send SMS"

    def test_phone_helpers(self) -> None:
        assert normalize_phone(" 15551234567 ") == "+15551234567"
        assert normalize_phone("+15551234567") == "+15551234567"
        assert mask_phone("+15551234567") == "+1555123XXXX"
        assert mask_phone("123") == "123"


class TestEmailSender:
    @pytest.mark.asyncio
    async def test_successful_send(self, email_sender: EmailSender, email_transport) -> None:
        result = await email_sender.send("a@x.com", "Subject", "<p>hi</p>")

        assert result.channel == DeliveryChannel.EMAIL
        assert result.success is True
        assert email_transport.sent == [("a@x.com", "Subject", "<p>hi</p>")]

    @pytest.mark.asyncio
    async def test_not_configured(self) -> None:
        result = await EmailSender(None).send("a@x.com", "Subject", "<p>hi</p>")

        assert result.success is False
        assert result.outcome == DeliveryOutcome.NOT_CONFIGURED
        assert "not configured" in result.message

    @pytest.mark.asyncio
    async def test_transport_failure_is_a_value(self, email_sender: EmailSender, email_transport) -> None:
        email_transport.error = smtplib.SMTPAuthenticationError(535, b"bad credentials")

        result = await email_sender.send("a@x.com", "Subject", "<p>hi</p>")

        assert result.success is False
        assert result.outcome == DeliveryOutcome.TRANSPORT_FAILURE
        assert "bad credentials" in result.message


class TestTransportFactories:
    def test_sms_transport_requires_all_credentials(self) -> None:
        settings = Settings(_env_file=None, TWILIO_ACCOUNT_SID="AC123", TWILIO_AUTH_TOKEN="tok", TWILIO_PHONE_NUMBER=None)
        assert build_sms_transport(settings) is None

    def test_sms_transport_built_from_settings(self) -> None:
        settings = Settings(
            _env_file=None,
            TWILIO_ACCOUNT_SID="AC123",
            TWILIO_AUTH_TOKEN="tok",
            TWILIO_PHONE_NUMBER="+15550000000",
        )
        with patch("medpal.services.sms_service.Client") as client_cls:
            transport = build_sms_transport(settings)

        assert isinstance(transport, TwilioSMSTransport)
        client_cls.assert_called_once_with("AC123", "tok")

    def test_email_transport_requires_credentials(self) -> None:
        settings = Settings(_env_file=None, SMTP_SERVER="smtp.x.com", SMTP_USERNAME=None, SMTP_PASSWORD=None)
        assert build_email_transport(settings) is None

    def test_email_transport_uses_login_as_sender(self) -> None:
        settings = Settings(
            _env_file=None,
            SMTP_SERVER="smtp.x.com",
            SMTP_USERNAME="alerts@x.com",
            SMTP_PASSWORD="secret",
            FROM_EMAIL=None,
        )
        transport = build_email_transport(settings)

        assert isinstance(transport, SMTPEmailTransport)
        assert transport.from_email == "alerts@x.com"


class TestTwilioSMSTransport:
    def test_send_uses_configured_sender_number(self) -> None:
        with patch("medpal.services.sms_service.Client") as client_cls:
            transport = TwilioSMSTransport("AC123", "tok", "+15550000000")
            transport.send("+15551234567", "hello")

        client_cls.return_value.messages.create.assert_called_once_with(
            body="hello", from_="+15550000000", to="+15551234567"
        )


class TestSMTPEmailTransport:
    def test_starttls_on_submission_port(self) -> None:
        transport = SMTPEmailTransport("smtp.x.com", 587, "alerts@x.com", "secret", "alerts@x.com")
        with patch("medpal.services.email_service.smtplib.SMTP") as smtp_cls:
            transport.send("a@x.com", "Subject", "<p>hi</p>")

        server = smtp_cls.return_value.__enter__.return_value
        smtp_cls.assert_called_once_with("smtp.x.com", 587)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("alerts@x.com", "secret")
        msg = server.send_message.call_args.args[0]
        assert msg["To"] == "a@x.com"
        assert msg["Subject"] == "Subject"

    def test_implicit_tls_on_port_465(self) -> None:
        transport = SMTPEmailTransport("smtp.x.com", 465, "alerts@x.com", "secret", "alerts@x.com")
        with patch("medpal.services.email_service.smtplib.SMTP_SSL") as smtp_ssl_cls:
            transport.send("a@x.com", "Subject", "<p>hi</p>")

        server = smtp_ssl_cls.return_value.__enter__.return_value
        server.login.assert_called_once_with("alerts@x.com", "secret")
        server.send_message.assert_called_once()

    def test_smtp_errors_propagate_to_sender(self) -> None:
        transport = SMTPEmailTransport("smtp.x.com", 587, "alerts@x.com", "secret", "alerts@x.com")
        with patch("medpal.services.email_service.smtplib.SMTP") as smtp_cls:
            smtp_cls.return_value.__enter__.return_value.login.side_effect = smtplib.SMTPAuthenticationError(
                535, b"bad credentials"
            )
            with pytest.raises(smtplib.SMTPAuthenticationError):
                transport.send("a@x.com", "Subject", "<p>hi</p>")

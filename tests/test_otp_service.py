"""Tests for one-time code generation and delivery."""

import pytest

from medpal.core.exceptions import ValidationError
from medpal.schemas.notifications import DeliveryChannel, DeliveryOutcome
from medpal.services.otp_service import OTP_MAX, OTP_MIN, OTPService
from medpal.services.sms_service import SMSSender


@pytest.fixture
def otp_service(sms_sender: SMSSender) -> OTPService:
    return OTPService(sms_sender)


class TestGenerate:
    def test_values_stay_in_six_digit_range(self) -> None:
        values = [int(OTPService.generate()) for _ in range(10_000)]

        assert all(OTP_MIN <= v <= OTP_MAX for v in values)
        # 10k uniform draws land in every tenth of the range with overwhelming probability
        buckets = {(v - OTP_MIN) * 10 // (OTP_MAX - OTP_MIN + 1) for v in values}
        assert buckets == set(range(10))

    def test_value_is_six_digit_string(self) -> None:
        otp = OTPService.generate()
        assert isinstance(otp, str)
        assert len(otp) == 6
        assert otp.isdigit()


class TestDispatch:
    @pytest.mark.asyncio
    async def test_sends_code_with_validity_notice(self, otp_service: OTPService, sms_transport) -> None:
        result = await otp_service.dispatch("15551234567", "482913")

        assert result.channel == DeliveryChannel.SMS
        assert result.success is True
        to, body = sms_transport.sent[0]
        assert to == "+15551234567"
        assert "482913" in body
        assert "10 minutes" in body

    @pytest.mark.asyncio
    async def test_unconfigured_sms(self) -> None:
        result = await OTPService(SMSSender(None)).dispatch("+15551234567", "482913")

        assert result.success is False
        assert result.outcome == DeliveryOutcome.NOT_CONFIGURED

    @pytest.mark.asyncio
    @pytest.mark.parametrize("otp", ["12345", "1234567", "12a456", "", "1234"])
    async def test_rejects_malformed_code(self, otp_service: OTPService, sms_transport, otp) -> None:
        with pytest.raises(ValidationError):
            await otp_service.dispatch("+15551234567", otp)
        assert sms_transport.sent == []

    @pytest.mark.asyncio
    async def test_rejects_blank_phone(self, otp_service: OTPService) -> None:
        with pytest.raises(ValidationError):
            await otp_service.dispatch("  ", "482913")

    @pytest.mark.asyncio
    async def test_send_new_code_returns_the_sent_code(self, otp_service: OTPService, sms_transport) -> None:
        otp, result = await otp_service.send_new_code("+15551234567")

        assert result.success is True
        assert otp in sms_transport.sent[0][1]

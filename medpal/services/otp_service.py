import logging
import secrets

from medpal.core.exceptions import ValidationError
from medpal.reminders.metrics import otp_dispatched_total
from medpal.schemas.notifications import DeliveryResult
from medpal.services.sms_service import SMSSender, mask_phone

logger = logging.getLogger(__name__)

OTP_MIN = 100000
OTP_MAX = 999999
OTP_VALIDITY_MINUTES = 10


class OTPService:
    """Generates 6-digit codes and sends them by SMS.

    Codes are not stored, rate limited or bound to a session here; whoever
    checks a code later owns that, including the expiry stated in the text.
    """

    def __init__(self, sms_sender: SMSSender):
        self.sms_sender = sms_sender

    @staticmethod
    def generate() -> str:
        return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))

    @staticmethod
    def render(otp: str) -> str:
        return (
            f"🏥 Your MedPal verification code is: {otp}. "
            f"This code will expire in {OTP_VALIDITY_MINUTES} minutes. "
            "Do not share this code with anyone."
        )

    async def dispatch(self, phone: str, otp: str) -> DeliveryResult:
        if not phone or not phone.strip():
            raise ValidationError("Phone number is required")
        if not (isinstance(otp, str) and len(otp) == 6 and otp.isdigit()):
            raise ValidationError("OTP must be a 6-digit numeric code")

        result = await self.sms_sender.send(phone, self.render(otp))
        otp_dispatched_total.inc()
        logger.info(f"📱 OTP dispatch to {mask_phone(phone.strip())}: success={result.success}")
        return result

    async def send_new_code(self, phone: str) -> tuple[str, DeliveryResult]:
        """Generate a fresh code and send it; the code is returned for the caller to store."""
        otp = self.generate()
        return otp, await self.dispatch(phone, otp)

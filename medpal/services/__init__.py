from .sms_service import SMSSender, SMSTransport, TwilioSMSTransport, build_sms_transport
from .email_service import EmailSender, EmailTransport, SMTPEmailTransport, build_email_transport
from .otp_service import OTPService

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from medpal.core.config import Settings
from medpal.core.exceptions import ValidationError
from medpal.services.email_service import EmailSender
from medpal.services.sms_service import SMSSender
from medpal.schemas.notifications import (
    ChannelSelector,
    DeliveryChannel,
    DeliveryResult,
    NotificationData,
    NotificationRequest,
    NotificationType,
    Recipient,
)
from medpal.utils.timezone import now_utc
from .metrics import notification_requests_total
from .templates import RENDERERS, RenderedMessage

logger = logging.getLogger(__name__)

# Payload fields each notification type cannot do without
REQUIRED_FIELDS: Dict[NotificationType, Tuple[str, ...]] = {
    NotificationType.MEDICINE_REMINDER: ("medicine", "reminder_time"),
    NotificationType.CRITICAL_MEDICINE_REMINDER: ("medicine", "reminder_time"),
    NotificationType.MISSED_MEDICINE_ALERT: ("medicine", "reminder_time"),
    NotificationType.LOW_STOCK_ALERT: ("medicine", "current_stock", "threshold"),
    NotificationType.APPOINTMENT_REMINDER: ("appointment",),
    NotificationType.REFILL_REMINDER: ("medicine", "days_left"),
}

# Field names as the API receives them
_WIRE_NAMES = {
    "reminder_time": "reminderTime",
    "days_left": "daysLeft",
    "current_stock": "currentStock",
}


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def parse_request(payload: Dict[str, Any]) -> NotificationRequest:
    """Build a request from an inbound dict, reporting schema problems as ``ValidationError``."""
    try:
        return NotificationRequest.model_validate(payload)
    except PydanticValidationError as e:
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        raise ValidationError("Invalid notification request", details={"errors": errors}) from e


class NotificationDispatcher:
    """Renders a notification and sends it over the requested channels.

    One ``DeliveryResult`` comes back per attempted channel, SMS before email.
    With ``both`` selected the two sends run concurrently and neither outcome
    affects the other. No overall success flag is computed: a delivered SMS
    next to a failed email is a normal result. Only malformed requests raise.
    """

    def __init__(self, sms_sender: SMSSender, email_sender: EmailSender, settings: Settings):
        self.sms_sender = sms_sender
        self.email_sender = email_sender
        self.tz_name = settings.DEFAULT_TIMEZONE

    def validate(self, request: NotificationRequest) -> None:
        missing = [
            _WIRE_NAMES.get(field, field)
            for field in REQUIRED_FIELDS[request.type]
            if _is_missing(getattr(request.data, field))
        ]
        if missing:
            raise ValidationError(
                f"Missing {' or '.join(missing)} for {request.type.value}",
                details={"missing": missing},
            )

        recipient = request.recipient
        if request.channel in (ChannelSelector.SMS, ChannelSelector.BOTH) and _is_missing(recipient.phone):
            raise ValidationError("Recipient phone number is required for SMS")
        if request.channel in (ChannelSelector.EMAIL, ChannelSelector.BOTH) and _is_missing(recipient.email):
            raise ValidationError("Recipient email is required for email")

    def render(self, request: NotificationRequest, now: Optional[datetime] = None) -> RenderedMessage:
        renderer = RENDERERS[request.type]
        return renderer(request.recipient, request.data, self.tz_name, now or now_utc())

    async def dispatch(self, request: NotificationRequest, now: Optional[datetime] = None) -> List[DeliveryResult]:
        self.validate(request)
        message = self.render(request, now)
        recipient = request.recipient

        channels: List[DeliveryChannel] = []
        sends = []
        if request.channel in (ChannelSelector.SMS, ChannelSelector.BOTH):
            channels.append(DeliveryChannel.SMS)
            sends.append(self.sms_sender.send(recipient.phone, message.sms_body))
        if request.channel in (ChannelSelector.EMAIL, ChannelSelector.BOTH):
            channels.append(DeliveryChannel.EMAIL)
            sends.append(self.email_sender.send(recipient.email, message.email_subject, message.email_html))

        logger.info(f"📨 Dispatching {request.type.value} to {recipient.email} via {request.channel.value}")
        notification_requests_total.labels(type=request.type.value).inc()

        # gather keeps argument order, so results line up with channels
        outcomes = await asyncio.gather(*sends, return_exceptions=True)
        results: List[DeliveryResult] = []
        for channel, outcome in zip(channels, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.error(f"❌ {channel.value} sender raised unexpectedly: {outcome!r}")
                outcome = DeliveryResult.failed(channel, str(outcome) or f"Failed to send {channel.value}")
            results.append(outcome)

        summary = ", ".join(f"{r.channel.value}={r.success}" for r in results)
        logger.info(f"📬 {request.type.value} for {recipient.email}: {summary}")
        return results

    async def notify(
        self,
        recipient: Recipient,
        type: NotificationType,
        channel: ChannelSelector = ChannelSelector.BOTH,
        **data: Any,
    ) -> List[DeliveryResult]:
        """Shortcut building the request from keyword payload fields."""
        try:
            request = NotificationRequest(
                recipient=recipient,
                type=type,
                channel=channel,
                data=NotificationData(**data),
            )
        except PydanticValidationError as e:
            raise ValidationError("Invalid notification request") from e
        return await self.dispatch(request)

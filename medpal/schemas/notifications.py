from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ChannelSelector(str, Enum):
    SMS = "sms"
    EMAIL = "email"
    BOTH = "both"


class DeliveryChannel(str, Enum):
    SMS = "sms"
    EMAIL = "email"


class NotificationType(str, Enum):
    MEDICINE_REMINDER = "medicine_reminder"
    CRITICAL_MEDICINE_REMINDER = "critical_medicine_reminder"
    MISSED_MEDICINE_ALERT = "missed_medicine_alert"
    LOW_STOCK_ALERT = "low_stock_alert"
    APPOINTMENT_REMINDER = "appointment_reminder"
    REFILL_REMINDER = "refill_reminder"


class DeliveryOutcome(str, Enum):
    DELIVERED = "delivered"
    NOT_CONFIGURED = "not_configured"
    TRANSPORT_FAILURE = "transport_failure"


class Recipient(BaseModel):
    name: str
    email: str
    phone: str


class NotificationData(BaseModel):
    """Payload for a notification; which fields are required depends on the type."""

    model_config = ConfigDict(populate_by_name=True)

    medicine: Optional[str] = None
    dosage: Optional[str] = None
    reminder_time: Optional[datetime] = Field(default=None, alias="reminderTime")
    appointment: Optional[str] = None
    days_left: Optional[int] = Field(default=None, alias="daysLeft", ge=0)
    current_stock: Optional[int] = Field(default=None, alias="currentStock", ge=0)
    threshold: Optional[int] = Field(default=None, ge=0)


class NotificationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    recipient: Recipient
    type: NotificationType
    channel: ChannelSelector = ChannelSelector.BOTH
    data: NotificationData = Field(default_factory=NotificationData)


# Body accepted over HTTP; the recipient comes from the bearer token
class NotificationRequestBody(BaseModel):
    type: NotificationType
    channel: ChannelSelector = ChannelSelector.BOTH
    data: NotificationData = Field(default_factory=NotificationData)


class DeliveryResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    channel: DeliveryChannel
    success: bool
    message: str
    outcome: DeliveryOutcome

    @classmethod
    def delivered(cls, channel: DeliveryChannel, message: str) -> "DeliveryResult":
        return cls(channel=channel, success=True, message=message, outcome=DeliveryOutcome.DELIVERED)

    @classmethod
    def not_configured(cls, channel: DeliveryChannel, message: str) -> "DeliveryResult":
        return cls(channel=channel, success=False, message=message, outcome=DeliveryOutcome.NOT_CONFIGURED)

    @classmethod
    def failed(cls, channel: DeliveryChannel, message: str) -> "DeliveryResult":
        return cls(channel=channel, success=False, message=message, outcome=DeliveryOutcome.TRANSPORT_FAILURE)


class NotificationResponse(BaseModel):
    success: bool = True
    result: list[DeliveryResult]

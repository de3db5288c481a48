from .user import UserCreate, UserInDBCreate, UserRecord, UserPublic
from .auth import LoginRequest, ClaimFields, IdentityClaim, AuthResult, AuthResponse, OtpSendResponse
from .notifications import (
    ChannelSelector,
    DeliveryChannel,
    DeliveryOutcome,
    DeliveryResult,
    NotificationData,
    NotificationRequest,
    NotificationRequestBody,
    NotificationResponse,
    NotificationType,
    Recipient,
)

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .notifications import DeliveryResult
from .user import UserPublic, UserRecord


# Request schemas
class LoginRequest(BaseModel):
    email: str
    password: str


# Token schemas
class ClaimFields(BaseModel):
    """User fields embedded in a signed token."""

    id: str
    name: str
    email: str
    phone: str


class IdentityClaim(ClaimFields):
    model_config = ConfigDict(frozen=True)

    iat: datetime
    exp: datetime

    def fields(self) -> ClaimFields:
        return ClaimFields(id=self.id, name=self.name, email=self.email, phone=self.phone)


# Service results
class AuthResult(BaseModel):
    user: UserRecord
    token: str


# Response schemas
class AuthResponse(BaseModel):
    success: bool = True
    user: UserPublic
    token: str
    # Delivery of the verification code sent on registration
    otp_result: Optional[DeliveryResult] = None


class OtpSendResponse(BaseModel):
    success: bool
    result: DeliveryResult
    expires_in_minutes: int = Field(default=10)
    message: Optional[str] = None

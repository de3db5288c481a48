from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, field_validator


class UserBase(BaseModel):
    name: str
    email: EmailStr
    phone: str
    age: Optional[int] = None
    gender: Optional[str] = None
    height: Optional[str] = None
    weight: Optional[str] = None

    @field_validator("height", "weight", mode="before")
    @classmethod
    def number_to_text(cls, v):
        # 170 and "170" are both accepted
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


# Properties to receive via API on registration
class UserCreate(UserBase):
    password: str

    @field_validator("name", "phone", "password")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("name", "phone")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


# Fields handed to the user store; the password is already hashed
class UserInDBCreate(UserBase):
    password_hash: str
    membership_type: str


class UserRecord(UserInDBCreate):
    """A stored user. Owned by the store; the core never mutates it."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str


# Properties returned to clients
class UserPublic(UserBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    membership_type: str

# expense_api/schemas/user.py
import uuid
from datetime import datetime
from typing import Optional

from fastapi_users import schemas
from pydantic import BaseModel, EmailStr, Field, field_validator

CURRENCY_PATTERN = r"^[A-Z]{3}$"


# Internal create/update payloads handed to the user manager
class UserCreate(schemas.BaseUserCreate):
    display_name: str
    monthly_income: float
    currency: Optional[str] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()


class UserUpdate(schemas.BaseUserUpdate):
    display_name: Optional[str] = None
    monthly_income: Optional[float] = None
    currency: Optional[str] = None


# Fields accepted on POST /auth/signup
class SignupRequest(BaseModel):
    email: EmailStr = Field(..., max_length=254)
    password: Optional[str] = None
    oauth_ticket: Optional[str] = Field(None, description="Signup ticket from a Google needs_signup result")
    display_name: str = Field(..., min_length=1, max_length=80)
    monthly_income: float = Field(..., gt=0, description="Monthly income must be greater than 0")
    # Password signups fall back to DEFAULT_CURRENCY; Google signups must send it
    currency: Optional[str] = Field(None, pattern=CURRENCY_PATTERN, description="3-letter code, e.g. INR, USD")

    @field_validator("display_name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class PasswordChangeRequest(BaseModel):
    current: str = Field(..., min_length=1)
    next: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    token: str


class SessionRead(BaseModel):
    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    expires_at: Optional[datetime] = None


# Public fields returned on GET /profile
class ProfileRead(BaseModel):
    id: uuid.UUID
    email: EmailStr
    display_name: str
    monthly_income: float
    currency: str
    avatar_url: Optional[str] = None
    has_password: bool
    oauth_provider: Optional[str] = None

    class Config:
        from_attributes = True


# Fields accepted on PUT /profile
class ProfileUpdate(BaseModel):
    display_name: str = Field(..., min_length=1, max_length=80)
    monthly_income: float = Field(..., gt=0)
    currency: str = Field(..., pattern=CURRENCY_PATTERN)

    @field_validator("display_name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

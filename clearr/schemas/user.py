from pydantic import EmailStr, Field
from datetime import datetime
from typing import Dict, List, Literal, Optional

from clearr.schemas.base import CamelModel

PreferredMode = Literal["professional", "personal", "casual"]


class SendOtpRequest(CamelModel):
    phone_number: str


class VerifyOtpRequest(CamelModel):
    phone_number: str
    otp_code: str = Field(..., min_length=4, max_length=10)
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None


class TokenRefresh(CamelModel):
    refresh_token: str


class Token(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserRead(CamelModel):
    id: int
    phone_number: str
    full_name: str
    email: Optional[str] = None
    push_token: Optional[str] = None
    notification_enabled: bool
    preferred_mode: str
    context_training: List[str] = Field(default_factory=list)
    is_verified: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


class AuthResult(CamelModel):
    user: UserRead
    token: Token
    is_new_user: bool


class ProfileUpdate(CamelModel):
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None
    preferred_mode: Optional[PreferredMode] = None
    notification_enabled: Optional[bool] = None
    push_token: Optional[str] = None


class OnboardingRequest(CamelModel):
    preferred_mode: PreferredMode = "personal"
    notification_enabled: bool = True


class DeleteAccountRequest(CamelModel):
    confirm_delete: bool = False
    reason: Optional[str] = None


class StyleExampleCreate(CamelModel):
    example: str


class UserStats(CamelModel):
    total_translations: int
    translations_by_mode: Dict[str, int]
    joined_date: datetime

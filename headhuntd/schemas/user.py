# user.py
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from headhuntd.schemas.base import CamelModel


RoleName = Literal["job-seeker", "employer"]


def validate_email_like(v: str) -> str:
    value = (v or "").strip().lower()
    if "@" not in value:
        raise ValueError("email must contain '@'")
    left, right = value.split("@", 1)
    if not left or not right:
        raise ValueError("email must have text before and after '@'")
    return value


class UserRead(CamelModel):
    id: str
    email: str
    full_name: str
    mobile_number: Optional[str] = None
    role: RoleName
    onboarding_flow: str
    selected_goal: Optional[str] = None
    subscription_status: str = "none"
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(CamelModel):
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    mobile_number: Optional[str] = Field(default=None, max_length=32)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AuthResponse(Token):
    user: UserRead


class CheckEmailRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def _validate_email_like(cls, v: str) -> str:
        return validate_email_like(v)


class CheckEmailResponse(BaseModel):
    exists: bool

# auth.py
from typing import Literal

from pydantic import Field, field_validator

from headhuntd.schemas.base import CamelModel
from headhuntd.schemas.user import RoleName, validate_email_like


class SignupRequest(CamelModel):
    email: str
    password: str = Field(min_length=8, max_length=128)
    full_name: str = Field(min_length=1, max_length=255)
    mobile_number: str | None = Field(default=None, max_length=32)
    role: RoleName = "job-seeker"
    selected_goal: Literal["find-work", "find-workers", "search-companies"] | None = None

    @field_validator("email")
    @classmethod
    def _validate_email_like(cls, v: str) -> str:
        return validate_email_like(v)

    @field_validator("full_name", mode="before")
    @classmethod
    def _strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class LoginRequest(CamelModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _validate_email_like(cls, v: str) -> str:
        return validate_email_like(v)

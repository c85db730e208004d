from __future__ import annotations

from datetime import date
from typing import Any, Literal

from pydantic import Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from headhuntd.schemas.base import CamelModel, strip_str, unique_tags


PERSONAL_SUMMARY_MAX = 5000
BUSINESS_SUMMARY_MAX = 500

WorkStatus = Literal["first-job", "worked-before", "currently-working"]
TimePreference = Literal["morning", "afternoon", "evening"]
NoticePreference = Literal["immediately", "any-other", "1-week", "2-weeks", "1-month", "flexible"]


def normalize_personal_summary(value: Any) -> dict[str, str] | None:
    """Coerce any stored personal summary into the ``{"summary": text}`` shape.

    Older accounts stored the summary as a bare string.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return {"summary": value}
    if isinstance(value, dict):
        summary = value.get("summary")
        return {"summary": summary if isinstance(summary, str) else ""}
    return {"summary": str(value)}


class PersonalDetailsStep(CamelModel):
    address: str = Field(min_length=1, max_length=500)
    date_of_birth: date | None = None
    mobile_number: str | None = Field(default=None, max_length=32)
    profile_image: str | None = None
    show_email_on_profile: bool = True
    show_mobile_on_profile: bool = True

    @field_validator("address", "mobile_number", mode="before")
    @classmethod
    def _strip(cls, v):
        return strip_str(v)


class PersonalSummaryStep(CamelModel):
    summary: str = Field(max_length=PERSONAL_SUMMARY_MAX)

    @field_validator("summary")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise PydanticCustomError("required", "Summary is required")
        return v


class BusinessSummaryStep(CamelModel):
    """Employer variant of the personal-summary step."""

    summary: str = Field(max_length=BUSINESS_SUMMARY_MAX)
    company_name: str | None = Field(default=None, max_length=255)
    company_size: str | None = None
    industry: str | None = None
    website: str | None = None
    abn: str | None = None
    your_role: str | None = None

    @field_validator("summary")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise PydanticCustomError("required", "Business summary is required")
        return v

    @field_validator("company_name", "company_size", "industry", "website", "abn", "your_role", mode="before")
    @classmethod
    def _strip(cls, v):
        return strip_str(v)


class WorkExperienceStep(CamelModel):
    selected_industry: str = Field(min_length=1)
    selected_skills: list[str] = Field(default_factory=list)
    work_status: WorkStatus | None = None
    employment_types: list[str] = Field(default_factory=list)
    role: str | None = None
    years_of_experience: str | None = None
    highest_education: str | None = None
    summary: str | None = Field(default=None, max_length=PERSONAL_SUMMARY_MAX)

    @field_validator("selected_industry", "role", mode="before")
    @classmethod
    def _strip(cls, v):
        return strip_str(v)

    @field_validator("selected_skills", "employment_types", mode="before")
    @classmethod
    def _dedupe(cls, v):
        return unique_tags(v)


class AvailabilityStep(CamelModel):
    time_preference: list[TimePreference] = Field(min_length=1)
    start_date: date | None = None
    end_date: date | None = None
    notice_preference: NoticePreference | None = None

    @field_validator("time_preference", mode="before")
    @classmethod
    def _dedupe(cls, v):
        return unique_tags(v)

    @field_validator("end_date")
    @classmethod
    def _not_before_start(cls, v: date | None, info: ValidationInfo) -> date | None:
        start = info.data.get("start_date")
        if v and start and v < start:
            raise PydanticCustomError("invalid", "End date cannot be before start date")
        return v


class PersonalSummary(CamelModel):
    summary: str = ""


class BusinessSummary(CamelModel):
    company_name: str | None = None
    company_size: str | None = None
    industry: str | None = None
    website: str | None = None
    abn: str | None = None
    your_role: str | None = None


class OnboardingStepResult(CamelModel):
    step: str
    next_step: str | None = None
    completed_steps: list[str]
    total_steps: int


class OnboardingStepList(CamelModel):
    flow: str
    steps: list[str]
    first_step: str
    total_steps: int


class ProfileProjection(CamelModel):
    id: str
    email: str
    full_name: str
    mobile_number: str | None = None
    role: str
    onboarding_flow: str
    personal_details: PersonalDetailsStep | None = None
    personal_summary: PersonalSummary | None = None
    work_experience: WorkExperienceStep | None = None
    availability: AvailabilityStep | None = None
    business_summary: BusinessSummary | None = None
    completed_steps: list[str] = Field(default_factory=list)
    next_step: str | None = None
    total_steps: int
    completion_percentage: int
    is_complete: bool

    @field_validator("personal_summary", mode="before")
    @classmethod
    def _coerce_legacy_personal_summary(cls, v):
        # Legacy: personalSummary stored as a bare string.
        return normalize_personal_summary(v)

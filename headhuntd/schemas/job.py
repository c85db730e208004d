from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from headhuntd.schemas.base import CamelModel, strip_str, unique_tags


JOB_TITLE_MAX = 200
JOB_SUMMARY_MAX = 5000

EmploymentType = Literal["full-time", "part-time", "casual", "contract"]
ShiftPreference = Literal["morning", "afternoon", "evening", "night", "flexible"]
MinimumExperience = Literal["no-experience", "1-2-years", "2-5-years", "5-10-years", "10plus-years"]
WorkLocation = Literal["on-site", "remote", "hybrid"]
SalaryFrequency = Literal["hourly", "daily", "weekly", "monthly", "yearly"]
JobStatus = Literal["draft", "published", "closed", "filled"]


# Step payloads. Each one is the full document stored for its step.

class JobDetailsStep(CamelModel):
    title: str = Field(min_length=1, max_length=JOB_TITLE_MAX)
    employment_type: EmploymentType
    shift_preference: ShiftPreference
    requires_work_rights: bool
    minimum_experience: MinimumExperience
    industry_type: str | None = None

    @field_validator("title", "industry_type", mode="before")
    @classmethod
    def _strip(cls, v):
        return strip_str(v)


class JobSummaryStep(CamelModel):
    description: str = Field(max_length=JOB_SUMMARY_MAX)

    @field_validator("description")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise PydanticCustomError("required", "Job summary is required")
        return v


class QualificationsStep(CamelModel):
    qualifications: list[str] = Field(min_length=1)

    @field_validator("qualifications", mode="before")
    @classmethod
    def _dedupe(cls, v):
        return unique_tags(v)


class SalaryRange(CamelModel):
    min: float | None = Field(default=None, ge=0)
    max: float | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _ordered(self) -> "SalaryRange":
        if self.min is not None and self.max is not None and self.min > self.max:
            raise PydanticCustomError("invalid", "Salary minimum cannot exceed maximum")
        return self


class PostJobStep(CamelModel):
    work_location: WorkLocation
    address: str | None = None
    city: str | None = None
    state: str | None = None
    postcode: str | None = None
    country: str = "Australia"
    salary: str | None = None
    salary_range: SalaryRange | None = None
    salary_frequency: SalaryFrequency = "hourly"
    number_of_positions: int = Field(default=1, ge=1)
    application_deadline: date | None = None

    @field_validator("address", "city", "state", "postcode", "salary", mode="before")
    @classmethod
    def _strip(cls, v):
        return strip_str(v)


# Projections

class OnboardingFlags(CamelModel):
    job_details_completed: bool = False
    job_summary_completed: bool = False
    qualifications_completed: bool = False
    post_job_completed: bool = False


class CompletionProjection(CamelModel):
    onboarding: OnboardingFlags
    completion_percentage: int
    next_step: str | None = None


class DraftProjection(CamelModel):
    id: str
    owner_id: str
    company_name: str | None = None
    status: JobStatus
    job_details: JobDetailsStep | None = None
    job_summary: JobSummaryStep | None = None
    qualifications: list[str] | None = None
    post_job: PostJobStep | None = None
    onboarding: OnboardingFlags
    completion_percentage: int
    next_step: str | None = None
    views: int = 0
    published_at: datetime | None = None
    closed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PublishResult(CamelModel):
    id: str
    status: JobStatus
    published_at: datetime


class JobStatusUpdate(CamelModel):
    status: JobStatus


class PublicJob(CamelModel):
    id: str
    company_name: str | None = None
    job_details: JobDetailsStep | None = None
    job_summary: JobSummaryStep | None = None
    qualifications: list[str] | None = None
    post_job: PostJobStep | None = None
    views: int = 0
    published_at: datetime | None = None


class SavedJobStatus(CamelModel):
    job_id: str
    saved: bool


class JobListResponse(CamelModel):
    total: int
    page: int
    limit: int
    pages: int
    jobs: list[DraftProjection]


class PublicJobListResponse(CamelModel):
    total: int
    page: int
    limit: int
    pages: int
    jobs: list[PublicJob]

# job_drafts.py
"""Job creation wizard: draft documents, step saves and the publish gate.

A job is created as an empty draft and filled in by four independently saved
steps. Each save replaces that step's document wholesale and marks the step
complete; a draft can only be published once every step has been saved.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from pydantic import BaseModel
from sqlalchemy import or_
from sqlalchemy.orm import Session

from headhuntd.errors import (
    AuthorizationError,
    ForbiddenError,
    IncompleteDraftError,
    InvalidTransitionError,
    NotFoundError,
)
from headhuntd.models.job import Job
from headhuntd.models.user import User
from headhuntd.schemas.job import (
    CompletionProjection,
    DraftProjection,
    JobDetailsStep,
    JobListResponse,
    JobSummaryStep,
    OnboardingFlags,
    PostJobStep,
    PublicJob,
    PublicJobListResponse,
    PublishResult,
    QualificationsStep,
)
from headhuntd.services import flows
from headhuntd.services.flows import Flow, JobStep, Role
from headhuntd.services.payloads import parse_step_payload
from headhuntd.utils.clock import utc_now


logger = logging.getLogger(__name__)

# step id -> (payload schema, document column, completion flag column)
_STEPS: dict[str, tuple[type[BaseModel], str, str]] = {
    JobStep.JOB_DETAILS.value: (JobDetailsStep, "job_details", "job_details_completed"),
    JobStep.JOB_SUMMARY.value: (JobSummaryStep, "job_summary", "job_summary_completed"),
    JobStep.QUALIFICATIONS.value: (QualificationsStep, "qualifications", "qualifications_completed"),
    JobStep.POST_JOB.value: (PostJobStep, "post_job", "post_job_completed"),
}

# Status writes allowed outside the publish gate. draft -> published is routed through publish().
_STATUS_TRANSITIONS: dict[str, set[str]] = {
    "draft": {"published"},
    "published": {"closed", "filled"},
    "closed": {"published", "filled"},
    "filled": {"published", "closed"},
}


def _document(step: str, payload: BaseModel) -> Any:
    data = payload.model_dump(mode="json")
    if step == JobStep.QUALIFICATIONS.value:
        return data["qualifications"]
    return data


def completed_steps(job: Job) -> list[str]:
    return [step for step, (_, _, flag) in _STEPS.items() if getattr(job, flag)]


def missing_steps(job: Job) -> list[str]:
    done = set(completed_steps(job))
    return [step for step in flows.steps_for(Flow.JOB_CREATION) if step not in done]


def build_flags(job: Job) -> OnboardingFlags:
    return OnboardingFlags(
        job_details_completed=bool(job.job_details_completed),
        job_summary_completed=bool(job.job_summary_completed),
        qualifications_completed=bool(job.qualifications_completed),
        post_job_completed=bool(job.post_job_completed),
    )


def build_completion(job: Job) -> CompletionProjection:
    done = completed_steps(job)
    return CompletionProjection(
        onboarding=build_flags(job),
        completion_percentage=flows.completion_percentage(Flow.JOB_CREATION, done),
        next_step=flows.first_incomplete_step(Flow.JOB_CREATION, done),
    )


def build_projection(job: Job) -> DraftProjection:
    completion = build_completion(job)
    return DraftProjection(
        id=job.id,
        owner_id=job.owner_id,
        company_name=job.company_name,
        status=job.status,
        job_details=job.job_details,
        job_summary=job.job_summary,
        qualifications=job.qualifications,
        post_job=job.post_job,
        onboarding=completion.onboarding,
        completion_percentage=completion.completion_percentage,
        next_step=completion.next_step,
        views=job.views or 0,
        published_at=job.published_at,
        closed_at=job.closed_at,
        created_at=job.created_at,
        updated_at=job.updated_at,
    )


def build_public_job(job: Job) -> PublicJob:
    return PublicJob(
        id=job.id,
        company_name=job.company_name,
        job_details=job.job_details,
        job_summary=job.job_summary,
        qualifications=job.qualifications,
        post_job=job.post_job,
        views=job.views or 0,
        published_at=job.published_at,
    )


def _load_owned(db: Session, job_id: str, actor_id: str) -> Job:
    job = db.query(Job).filter(Job.id == job_id).first()
    if job is None:
        raise NotFoundError("Job")
    if job.owner_id != actor_id:
        logger.warning("job.access_denied job_id=%s actor_id=%s", job_id, actor_id)
        raise AuthorizationError("Job")
    return job


def _company_name(owner: User) -> str:
    business = owner.business_summary if isinstance(owner.business_summary, dict) else {}
    return (business.get("company_name") or "").strip() or owner.full_name


def create_draft(db: Session, owner: User) -> Job:
    if owner.role != Role.EMPLOYER.value:
        raise ForbiddenError("Only employers can create jobs")
    now = utc_now()
    job = Job(
        owner_id=owner.id,
        company_name=_company_name(owner),
        status="draft",
        job_details_completed=False,
        job_summary_completed=False,
        qualifications_completed=False,
        post_job_completed=False,
        created_at=now,
        updated_at=now,
    )
    db.add(job)
    db.commit()
    db.refresh(job)
    logger.info("job.draft_created job_id=%s owner_id=%s", job.id, owner.id)
    return job


def save_step(db: Session, draft_id: str, step_name: str, payload: Any, actor_id: str) -> CompletionProjection:
    job = _load_owned(db, draft_id, actor_id)
    flows.validate_step(Flow.JOB_CREATION, step_name)
    schema, column, flag = _STEPS[step_name]

    # Validation happens before any attribute is touched, so a rejected payload leaves the row as it was.
    parsed = parse_step_payload(schema, payload)

    setattr(job, column, _document(step_name, parsed))
    setattr(job, flag, True)
    job.updated_at = utc_now()
    db.commit()
    db.refresh(job)
    logger.info("job.step_saved job_id=%s step=%s", job.id, step_name)
    return build_completion(job)


def get_draft(db: Session, draft_id: str, actor_id: str) -> DraftProjection:
    return build_projection(_load_owned(db, draft_id, actor_id))


def _publish(db: Session, job: Job) -> PublishResult:
    if job.status == "published":
        return PublishResult(id=job.id, status="published", published_at=job.published_at)
    if job.status != "draft":
        raise InvalidTransitionError(job.status, "published")

    missing = missing_steps(job)
    if missing:
        logger.info("job.publish_rejected job_id=%s missing=%s", job.id, ",".join(missing))
        raise IncompleteDraftError(missing)

    now = utc_now()
    job.status = "published"
    job.published_at = now
    job.updated_at = now
    db.commit()
    db.refresh(job)
    logger.info("job.published job_id=%s", job.id)
    return PublishResult(id=job.id, status="published", published_at=job.published_at)


def publish(db: Session, draft_id: str, actor_id: str) -> PublishResult:
    return _publish(db, _load_owned(db, draft_id, actor_id))


def update_status(db: Session, job_id: str, target: str, actor_id: str) -> DraftProjection:
    job = _load_owned(db, job_id, actor_id)
    current = job.status
    if target == current:
        return build_projection(job)
    if target not in _STATUS_TRANSITIONS.get(current, set()):
        raise InvalidTransitionError(current, target)

    if current == "draft":
        _publish(db, job)
        return build_projection(job)

    now = utc_now()
    job.status = target
    if target == "closed":
        job.closed_at = now
    elif target == "published":
        job.closed_at = None
    job.updated_at = now
    db.commit()
    db.refresh(job)
    logger.info("job.status_changed job_id=%s from=%s to=%s", job.id, current, target)
    return build_projection(job)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def list_owner_jobs(
    db: Session,
    owner_id: str,
    *,
    status: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> JobListResponse:
    query = db.query(Job).filter(Job.owner_id == owner_id)
    if status:
        query = query.filter(Job.status == status)
    total = query.count()
    jobs = query.order_by(Job.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return JobListResponse(
        total=total,
        page=page,
        limit=limit,
        pages=page_count(total, limit),
        jobs=[build_projection(job) for job in jobs],
    )


def list_published_jobs(
    db: Session,
    *,
    search: str | None = None,
    employment_type: str | None = None,
    shift_preference: str | None = None,
    work_location: str | None = None,
    page: int = 1,
    limit: int = 20,
) -> PublicJobListResponse:
    query = db.query(Job).filter(Job.status == "published")
    if employment_type:
        query = query.filter(Job.job_details["employment_type"].as_string() == employment_type)
    if shift_preference:
        query = query.filter(Job.job_details["shift_preference"].as_string() == shift_preference)
    if work_location:
        query = query.filter(Job.post_job["work_location"].as_string() == work_location)
    term = (search or "").strip()
    if term:
        pattern = f"%{_escape_like(term)}%"
        query = query.filter(
            or_(
                Job.job_details["title"].as_string().ilike(pattern, escape="\\"),
                Job.company_name.ilike(pattern, escape="\\"),
                Job.job_summary["description"].as_string().ilike(pattern, escape="\\"),
            )
        )
    total = query.count()
    jobs = query.order_by(Job.published_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return PublicJobListResponse(
        total=total,
        page=page,
        limit=limit,
        pages=page_count(total, limit),
        jobs=[build_public_job(job) for job in jobs],
    )


def load_published_job(db: Session, job_id: str) -> Job:
    job = db.query(Job).filter(Job.id == job_id, Job.status == "published").first()
    if job is None:
        raise NotFoundError("Job")
    return job


def get_published_job(db: Session, job_id: str) -> PublicJob:
    """Public read of a published job; each read counts as one view."""
    job = load_published_job(db, job_id)
    # Counting a view is not an edit, so updated_at is written back unchanged.
    db.query(Job).filter(Job.id == job.id).update(
        {Job.views: Job.views + 1, Job.updated_at: Job.updated_at},
        synchronize_session=False,
    )
    db.commit()
    db.refresh(job)
    return build_public_job(job)

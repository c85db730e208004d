# jobs.py
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from headhuntd.database import get_db
from headhuntd.models.user import User
from headhuntd.routers.dependencies import get_current_user, require_employer
from headhuntd.schemas.job import (
    CompletionProjection,
    DraftProjection,
    JobListResponse,
    JobStatus,
    JobStatusUpdate,
    PublicJob,
    PublicJobListResponse,
    PublishResult,
    SavedJobStatus,
)
from headhuntd.services import job_drafts, saved_jobs


router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.post("", response_model=DraftProjection, status_code=status.HTTP_201_CREATED)
def create_job_draft(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    job = job_drafts.create_draft(db, current_user)
    return job_drafts.build_projection(job)


@router.get("/mine", response_model=JobListResponse)
def list_my_jobs(
    status_filter: Optional[JobStatus] = Query(default=None, alias="status"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employer),
):
    return job_drafts.list_owner_jobs(db, current_user.id, status=status_filter, page=page, limit=limit)


@router.get("/published", response_model=PublicJobListResponse)
def list_published_jobs(
    search: Optional[str] = Query(default=None),
    employment_type: Optional[str] = Query(default=None, alias="employmentType"),
    shift_preference: Optional[str] = Query(default=None, alias="shiftPreference"),
    work_location: Optional[str] = Query(default=None, alias="workLocation"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return job_drafts.list_published_jobs(
        db,
        search=search,
        employment_type=employment_type,
        shift_preference=shift_preference,
        work_location=work_location,
        page=page,
        limit=limit,
    )


@router.get("/published/{job_id}", response_model=PublicJob)
def read_published_job(job_id: str, db: Session = Depends(get_db)):
    return job_drafts.get_published_job(db, job_id)


@router.post("/published/{job_id}/save", response_model=SavedJobStatus)
def save_published_job(job_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return saved_jobs.save_job(db, current_user.id, job_id)


@router.delete("/published/{job_id}/save", response_model=SavedJobStatus)
def unsave_published_job(job_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return saved_jobs.unsave_job(db, current_user.id, job_id)


@router.get("/saved", response_model=PublicJobListResponse)
def list_saved_jobs(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return saved_jobs.list_saved_jobs(db, current_user.id, page=page, limit=limit)


@router.put("/{job_id}/steps/{step}", response_model=CompletionProjection)
def save_job_step(
    job_id: str,
    step: str,
    payload: Any = Body(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return job_drafts.save_step(db, job_id, step, payload, current_user.id)


@router.get("/{job_id}", response_model=DraftProjection)
def read_job_draft(job_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return job_drafts.get_draft(db, job_id, current_user.id)


@router.post("/{job_id}/publish", response_model=PublishResult)
def publish_job(job_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return job_drafts.publish(db, job_id, current_user.id)


@router.patch("/{job_id}/status", response_model=DraftProjection)
def update_job_status(
    job_id: str,
    update: JobStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return job_drafts.update_status(db, job_id, update.status, current_user.id)

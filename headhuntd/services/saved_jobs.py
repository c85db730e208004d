# saved_jobs.py
"""Bookmarks a user keeps on published jobs."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from headhuntd.models.job import Job
from headhuntd.models.saved_job import SavedJob
from headhuntd.schemas.job import PublicJobListResponse, SavedJobStatus
from headhuntd.services import job_drafts


logger = logging.getLogger(__name__)


def _find(db: Session, user_id: str, job_id: str) -> SavedJob | None:
    return db.query(SavedJob).filter(SavedJob.user_id == user_id, SavedJob.job_id == job_id).first()


def save_job(db: Session, user_id: str, job_id: str) -> SavedJobStatus:
    """Bookmark a published job. Saving it again is a no-op."""
    job = job_drafts.load_published_job(db, job_id)
    if _find(db, user_id, job.id) is None:
        db.add(SavedJob(user_id=user_id, job_id=job.id))
        try:
            db.commit()
        except IntegrityError:
            # Saved by a concurrent request; the bookmark exists either way.
            db.rollback()
        else:
            logger.info("job.saved job_id=%s user_id=%s", job.id, user_id)
    return SavedJobStatus(job_id=job.id, saved=True)


def unsave_job(db: Session, user_id: str, job_id: str) -> SavedJobStatus:
    """Remove a bookmark. Removing one that does not exist is a no-op for published jobs."""
    saved = _find(db, user_id, job_id)
    if saved is None:
        # Only published jobs are visible here; anything else stays NotFound.
        job_drafts.load_published_job(db, job_id)
        return SavedJobStatus(job_id=job_id, saved=False)
    db.delete(saved)
    db.commit()
    logger.info("job.unsaved job_id=%s user_id=%s", job_id, user_id)
    return SavedJobStatus(job_id=job_id, saved=False)


def list_saved_jobs(db: Session, user_id: str, *, page: int = 1, limit: int = 20) -> PublicJobListResponse:
    """The user's bookmarked jobs that are still published, most recently saved first."""
    query = (
        db.query(Job)
        .join(SavedJob, SavedJob.job_id == Job.id)
        .filter(SavedJob.user_id == user_id, Job.status == "published")
    )
    total = query.count()
    jobs = query.order_by(SavedJob.created_at.desc(), Job.published_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return PublicJobListResponse(
        total=total,
        page=page,
        limit=limit,
        pages=job_drafts.page_count(total, limit),
        jobs=[job_drafts.build_public_job(job) for job in jobs],
    )

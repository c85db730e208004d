from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String
from sqlalchemy.sql import func

from headhuntd.database import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    company_name = Column(String(255), nullable=True)
    status = Column(String(16), nullable=False, default="draft", index=True)

    # Step documents
    job_details = Column(JSON(none_as_null=True), nullable=True)
    job_summary = Column(JSON(none_as_null=True), nullable=True)
    qualifications = Column(JSON(none_as_null=True), nullable=True)
    post_job = Column(JSON(none_as_null=True), nullable=True)

    # Set once the matching document has been saved; never cleared.
    job_details_completed = Column(Boolean, nullable=False, default=False)
    job_summary_completed = Column(Boolean, nullable=False, default=False)
    qualifications_completed = Column(Boolean, nullable=False, default=False)
    post_job_completed = Column(Boolean, nullable=False, default=False)

    # Public reads of the published job.
    views = Column(Integer, nullable=False, default=0)

    published_at = Column(DateTime(timezone=True), nullable=True, index=True)
    closed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

# onboarding.py
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from headhuntd.errors import NotFoundError
from headhuntd.models.user import User
from headhuntd.schemas.profile import (
    AvailabilityStep,
    BusinessSummaryStep,
    OnboardingStepResult,
    PersonalDetailsStep,
    PersonalSummaryStep,
    ProfileProjection,
    WorkExperienceStep,
    normalize_personal_summary,
)
from headhuntd.services import flows
from headhuntd.services.flows import OnboardingStep, Role
from headhuntd.services.payloads import parse_step_payload


logger = logging.getLogger(__name__)


def _get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFoundError("User")
    return user


def completed_onboarding_steps(user: User) -> list[str]:
    """Steps of the user's flow whose document is populated, in flow order."""
    summary = normalize_personal_summary(user.personal_summary)
    populated = {
        OnboardingStep.PERSONAL_DETAILS.value: bool(user.personal_details),
        OnboardingStep.PERSONAL_SUMMARY.value: bool(summary and summary["summary"].strip()),
        OnboardingStep.WORK_EXPERIENCE.value: bool(user.work_experience),
        OnboardingStep.AVAILABILITY.value: bool(user.availability),
    }
    return [step for step in flows.steps_for(user.onboarding_flow) if populated[step]]


def _apply_personal_summary(user: User, payload: Any) -> None:
    if user.role == Role.EMPLOYER.value:
        parsed = parse_step_payload(BusinessSummaryStep, payload)
        data = parsed.model_dump(mode="json")
        user.personal_summary = {"summary": data.pop("summary")}
        user.business_summary = data
    else:
        parsed = parse_step_payload(PersonalSummaryStep, payload)
        user.personal_summary = {"summary": parsed.summary}


def save_onboarding_step(db: Session, user_id: str, step_name: str, payload: Any) -> OnboardingStepResult:
    user = _get_user(db, user_id)
    flow = user.onboarding_flow
    flows.validate_step(flow, step_name)

    if step_name == OnboardingStep.PERSONAL_DETAILS.value:
        details = parse_step_payload(PersonalDetailsStep, payload)
        user.personal_details = details.model_dump(mode="json")
        # The account's mobile number mirrors the latest personal-details document.
        user.mobile_number = details.mobile_number
    elif step_name == OnboardingStep.PERSONAL_SUMMARY.value:
        _apply_personal_summary(user, payload)
    elif step_name == OnboardingStep.WORK_EXPERIENCE.value:
        user.work_experience = parse_step_payload(WorkExperienceStep, payload).model_dump(mode="json")
    else:
        user.availability = parse_step_payload(AvailabilityStep, payload).model_dump(mode="json")

    db.commit()
    db.refresh(user)
    logger.info("onboarding.step_saved user_id=%s step=%s", user.id, step_name)

    return OnboardingStepResult(
        step=step_name,
        next_step=flows.next_step(flow, step_name),
        completed_steps=completed_onboarding_steps(user),
        total_steps=flows.total_steps(flow),
    )


def build_profile_projection(user: User) -> ProfileProjection:
    flow = user.onboarding_flow
    done = completed_onboarding_steps(user)
    next_step = flows.first_incomplete_step(flow, done)
    return ProfileProjection(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        mobile_number=user.mobile_number,
        role=user.role,
        onboarding_flow=flow,
        personal_details=user.personal_details,
        personal_summary=user.personal_summary,
        work_experience=user.work_experience,
        availability=user.availability,
        business_summary=user.business_summary,
        completed_steps=done,
        next_step=next_step,
        total_steps=flows.total_steps(flow),
        completion_percentage=flows.completion_percentage(flow, done),
        is_complete=next_step is None,
    )


def get_profile_projection(db: Session, user_id: str) -> ProfileProjection:
    return build_profile_projection(_get_user(db, user_id))


def migrate_personal_summaries(db: Session, dry_run: bool = False) -> int:
    """Rewrite bare-string personal summaries as ``{"summary": text}``; returns the number of users touched."""
    users = db.query(User).filter(User.personal_summary.isnot(None)).all()
    migrated = 0
    for user in users:
        if not isinstance(user.personal_summary, str):
            continue
        migrated += 1
        if not dry_run:
            user.personal_summary = normalize_personal_summary(user.personal_summary)
    if not dry_run:
        db.commit()
    logger.info("onboarding.personal_summary_migrated count=%s dry_run=%s", migrated, dry_run)
    return migrated

"""Step sequences for the onboarding and job-creation wizards.

Each flow is a fixed, ordered tuple of step ids. A user's onboarding flow is
chosen from their role once, at signup, and stored on the user; job drafts
always use the job-creation flow.
"""

from __future__ import annotations

from enum import Enum

from headhuntd.errors import ValidationError


class Role(str, Enum):
    JOB_SEEKER = "job-seeker"
    EMPLOYER = "employer"


class Flow(str, Enum):
    JOB_SEEKER_ONBOARDING = "job-seeker-onboarding"
    EMPLOYER_ONBOARDING = "employer-onboarding"
    JOB_CREATION = "job-creation"


class OnboardingStep(str, Enum):
    PERSONAL_DETAILS = "personal-details"
    PERSONAL_SUMMARY = "personal-summary"
    WORK_EXPERIENCE = "work-experience"
    AVAILABILITY = "availability"


class JobStep(str, Enum):
    JOB_DETAILS = "jobDetails"
    JOB_SUMMARY = "jobSummary"
    QUALIFICATIONS = "qualifications"
    POST_JOB = "postJob"


FLOW_STEPS: dict[Flow, tuple[str, ...]] = {
    Flow.JOB_SEEKER_ONBOARDING: (
        OnboardingStep.PERSONAL_DETAILS.value,
        OnboardingStep.PERSONAL_SUMMARY.value,
        OnboardingStep.WORK_EXPERIENCE.value,
        OnboardingStep.AVAILABILITY.value,
    ),
    Flow.EMPLOYER_ONBOARDING: (
        OnboardingStep.PERSONAL_DETAILS.value,
        OnboardingStep.PERSONAL_SUMMARY.value,
    ),
    Flow.JOB_CREATION: (
        JobStep.JOB_DETAILS.value,
        JobStep.JOB_SUMMARY.value,
        JobStep.QUALIFICATIONS.value,
        JobStep.POST_JOB.value,
    ),
}

_ONBOARDING_FLOW_BY_ROLE = {
    Role.JOB_SEEKER: Flow.JOB_SEEKER_ONBOARDING,
    Role.EMPLOYER: Flow.EMPLOYER_ONBOARDING,
}


def onboarding_flow_for_role(role: Role | str) -> Flow:
    try:
        return _ONBOARDING_FLOW_BY_ROLE[Role(role)]
    except ValueError as exc:
        raise ValidationError("role", "invalid", f"Unknown role: {role}") from exc


def steps_for(flow: Flow | str) -> tuple[str, ...]:
    return FLOW_STEPS[Flow(flow)]


def total_steps(flow: Flow | str) -> int:
    return len(steps_for(flow))


def first_step(flow: Flow | str) -> str:
    return steps_for(flow)[0]


def validate_step(flow: Flow | str, step: str) -> str:
    if step not in steps_for(flow):
        raise ValidationError("step", "notInFlow", f"Step '{step}' is not part of the {Flow(flow).value} flow")
    return step


def next_step(flow: Flow | str, current: str) -> str | None:
    """Return the step after ``current``, or None when ``current`` is the last one."""
    steps = steps_for(flow)
    index = steps.index(validate_step(flow, current))
    if index + 1 < len(steps):
        return steps[index + 1]
    return None


def first_incomplete_step(flow: Flow | str, completed: set[str] | list[str]) -> str | None:
    done = set(completed)
    for step in steps_for(flow):
        if step not in done:
            return step
    return None


def completion_percentage(flow: Flow | str, completed: set[str] | list[str]) -> int:
    steps = steps_for(flow)
    done = set(completed) & set(steps)
    return round(100 * len(done) / len(steps))

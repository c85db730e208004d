from itertools import combinations

import pytest

from headhuntd.errors import (
    AuthorizationError,
    ForbiddenError,
    IncompleteDraftError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from headhuntd.models.job import Job
from headhuntd.services import job_drafts


JOB_STEPS = ("jobDetails", "jobSummary", "qualifications", "postJob")

PAYLOADS = {
    "jobDetails": {
        "title": "Barista",
        "employmentType": "part-time",
        "shiftPreference": "morning",
        "requiresWorkRights": True,
        "minimumExperience": "1-2-years",
    },
    "jobSummary": {"description": "Pull shots and keep the bar tidy."},
    "qualifications": {"qualifications": ["RSA", "Barista certificate"]},
    "postJob": {"workLocation": "on-site", "city": "Sydney", "salary": "30", "salaryFrequency": "hourly"},
}


@pytest.fixture()
def employer(make_user):
    return make_user("boss@example.com", role="employer", full_name="Bean There")


@pytest.fixture()
def draft(db, employer) -> Job:
    return job_drafts.create_draft(db, employer)


def _fill(db, job: Job, actor_id: str, steps=JOB_STEPS):
    result = None
    for step in steps:
        result = job_drafts.save_step(db, job.id, step, PAYLOADS[step], actor_id)
    return result


def test_new_draft_is_empty(db, employer, draft) -> None:
    assert draft.status == "draft"
    assert draft.company_name == "Bean There"

    projection = job_drafts.get_draft(db, draft.id, employer.id)
    assert projection.completion_percentage == 0
    assert projection.next_step == "jobDetails"
    assert projection.onboarding.job_details_completed is False
    assert projection.job_details is None


def test_company_name_comes_from_business_summary(db, make_user) -> None:
    owner = make_user("owner@example.com", business_summary={"company_name": "  Cafe Co "})
    job = job_drafts.create_draft(db, owner)
    assert job.company_name == "Cafe Co"


def test_only_employers_create_drafts(db, make_user) -> None:
    seeker = make_user("seeker@example.com", role="job-seeker")
    with pytest.raises(ForbiddenError):
        job_drafts.create_draft(db, seeker)
    assert db.query(Job).count() == 0


def test_partial_save_rejection_and_incomplete_publish(db, employer, draft) -> None:
    result = job_drafts.save_step(db, draft.id, "jobDetails", PAYLOADS["jobDetails"], employer.id)
    assert result.completion_percentage == 25
    assert result.onboarding.job_details_completed is True
    assert result.next_step == "jobSummary"

    with pytest.raises(ValidationError) as excinfo:
        job_drafts.save_step(db, draft.id, "jobSummary", {"description": "x" * 5001}, employer.id)
    assert excinfo.value.field == "description"
    assert excinfo.value.reason == "fieldTooLong"

    db.expire_all()
    stored = db.get(Job, draft.id)
    assert stored.job_summary is None
    assert stored.job_summary_completed is False
    assert job_drafts.get_draft(db, draft.id, employer.id).completion_percentage == 25

    result = job_drafts.save_step(db, draft.id, "jobSummary", {"description": "x" * 200}, employer.id)
    assert result.completion_percentage == 50

    with pytest.raises(IncompleteDraftError) as excinfo:
        job_drafts.publish(db, draft.id, employer.id)
    assert excinfo.value.missing == ["qualifications", "postJob"]
    assert db.get(Job, draft.id).status == "draft"


def test_missing_and_blank_fields_are_required(db, employer, draft) -> None:
    with pytest.raises(ValidationError) as excinfo:
        job_drafts.save_step(db, draft.id, "jobSummary", {}, employer.id)
    assert excinfo.value.reason == "required"

    with pytest.raises(ValidationError) as excinfo:
        job_drafts.save_step(db, draft.id, "jobSummary", {"description": "   "}, employer.id)
    assert excinfo.value.reason == "required"

    with pytest.raises(ValidationError) as excinfo:
        job_drafts.save_step(db, draft.id, "qualifications", {"qualifications": [" ", ""]}, employer.id)
    assert excinfo.value.field == "qualifications"
    assert excinfo.value.reason == "required"


def test_invalid_enum_value(db, employer, draft) -> None:
    payload = dict(PAYLOADS["jobDetails"], employmentType="forever")
    with pytest.raises(ValidationError) as excinfo:
        job_drafts.save_step(db, draft.id, "jobDetails", payload, employer.id)
    assert excinfo.value.reason == "invalid"


def test_payload_must_be_an_object(db, employer, draft) -> None:
    with pytest.raises(ValidationError) as excinfo:
        job_drafts.save_step(db, draft.id, "qualifications", ["RSA"], employer.id)
    assert excinfo.value.field == "payload"
    assert excinfo.value.reason == "invalid"


def test_unknown_step_is_not_in_flow(db, employer, draft) -> None:
    with pytest.raises(ValidationError) as excinfo:
        job_drafts.save_step(db, draft.id, "personal-details", {"address": "1 Main St"}, employer.id)
    assert excinfo.value.reason == "notInFlow"


def test_resave_replaces_the_whole_document(db, employer, draft) -> None:
    job_drafts.save_step(db, draft.id, "postJob", PAYLOADS["postJob"], employer.id)
    result = job_drafts.save_step(db, draft.id, "postJob", {"workLocation": "remote"}, employer.id)
    assert result.completion_percentage == 25

    projection = job_drafts.get_draft(db, draft.id, employer.id)
    assert projection.post_job.work_location == "remote"
    assert projection.post_job.city is None
    assert projection.post_job.salary is None


def test_duplicate_submission_is_idempotent(db, employer, draft) -> None:
    first = job_drafts.save_step(db, draft.id, "jobDetails", PAYLOADS["jobDetails"], employer.id)
    second = job_drafts.save_step(db, draft.id, "jobDetails", PAYLOADS["jobDetails"], employer.id)
    assert first == second
    assert job_drafts.get_draft(db, draft.id, employer.id).job_details.title == "Barista"


def test_steps_can_be_saved_out_of_order(db, employer, draft) -> None:
    result = _fill(db, draft, employer.id, steps=("postJob", "qualifications"))
    assert result.completion_percentage == 50
    assert result.next_step == "jobDetails"


def test_qualifications_are_deduplicated(db, employer, draft) -> None:
    payload = {"qualifications": ["RSA", " rsa ", "First Aid", "", "first aid"]}
    job_drafts.save_step(db, draft.id, "qualifications", payload, employer.id)
    assert job_drafts.get_draft(db, draft.id, employer.id).qualifications == ["RSA", "First Aid"]


@pytest.mark.parametrize(
    "saved",
    [subset for size in range(len(JOB_STEPS)) for subset in combinations(JOB_STEPS, size)],
)
def test_publish_requires_every_step(db, employer, saved) -> None:
    job = job_drafts.create_draft(db, employer)
    _fill(db, job, employer.id, steps=saved)

    with pytest.raises(IncompleteDraftError) as excinfo:
        job_drafts.publish(db, job.id, employer.id)
    assert excinfo.value.missing == [step for step in JOB_STEPS if step not in saved]


def test_publish_complete_draft(db, employer, draft) -> None:
    _fill(db, draft, employer.id)
    result = job_drafts.publish(db, draft.id, employer.id)
    assert result.status == "published"
    assert result.published_at is not None

    again = job_drafts.publish(db, draft.id, employer.id)
    assert again.published_at == result.published_at


def test_editing_a_published_job_keeps_it_published(db, employer, draft) -> None:
    _fill(db, draft, employer.id)
    job_drafts.publish(db, draft.id, employer.id)
    job_drafts.save_step(db, draft.id, "jobSummary", {"description": "Updated"}, employer.id)

    projection = job_drafts.get_draft(db, draft.id, employer.id)
    assert projection.status == "published"
    assert projection.job_summary.description == "Updated"


def test_other_actor_gets_authorization_error(db, employer, draft, make_user) -> None:
    intruder = make_user("intruder@example.com")

    with pytest.raises(AuthorizationError):
        job_drafts.get_draft(db, draft.id, intruder.id)
    # Payload validation must not run before the ownership check.
    with pytest.raises(AuthorizationError):
        job_drafts.save_step(db, draft.id, "jobSummary", {}, intruder.id)
    with pytest.raises(AuthorizationError):
        job_drafts.publish(db, draft.id, intruder.id)

    db.expire_all()
    assert db.get(Job, draft.id).job_summary is None


def test_missing_draft_is_not_found(db, employer) -> None:
    with pytest.raises(NotFoundError) as excinfo:
        job_drafts.get_draft(db, "does-not-exist", employer.id)
    assert not isinstance(excinfo.value, AuthorizationError)


def test_authorization_error_looks_like_not_found() -> None:
    assert str(AuthorizationError("Job")) == str(NotFoundError("Job"))
    assert AuthorizationError.status_code == NotFoundError.status_code


def test_status_transitions(db, employer, draft) -> None:
    with pytest.raises(InvalidTransitionError):
        job_drafts.update_status(db, draft.id, "closed", employer.id)
    with pytest.raises(IncompleteDraftError):
        job_drafts.update_status(db, draft.id, "published", employer.id)

    _fill(db, draft, employer.id)
    published = job_drafts.update_status(db, draft.id, "published", employer.id)
    assert published.status == "published"
    assert published.published_at is not None

    closed = job_drafts.update_status(db, draft.id, "closed", employer.id)
    assert closed.status == "closed"
    assert closed.closed_at is not None

    reopened = job_drafts.update_status(db, draft.id, "published", employer.id)
    assert reopened.status == "published"
    assert reopened.closed_at is None

    with pytest.raises(InvalidTransitionError):
        job_drafts.update_status(db, draft.id, "draft", employer.id)

    filled = job_drafts.update_status(db, draft.id, "filled", employer.id)
    assert filled.status == "filled"
    assert job_drafts.update_status(db, draft.id, "filled", employer.id).status == "filled"


def test_listings(db, employer, make_user) -> None:
    other = make_user("other@example.com", full_name="Tea Time")
    mine_draft = job_drafts.create_draft(db, employer)
    mine_live = job_drafts.create_draft(db, employer)
    theirs = job_drafts.create_draft(db, other)
    _fill(db, mine_live, employer.id)
    job_drafts.publish(db, mine_live.id, employer.id)
    _fill(db, theirs, other.id)

    mine = job_drafts.list_owner_jobs(db, employer.id)
    assert mine.total == 2
    assert [job.id for job in mine.jobs] == [mine_live.id, mine_draft.id]
    assert job_drafts.list_owner_jobs(db, employer.id, status="draft").total == 1

    public = job_drafts.list_published_jobs(db)
    assert [job.id for job in public.jobs] == [mine_live.id]
    assert job_drafts.list_published_jobs(db, search="barista").total == 1
    # LIKE wildcards in the search term match literally.
    assert job_drafts.list_published_jobs(db, search="%").total == 0
    assert job_drafts.list_published_jobs(db, search="Bar_sta").total == 0
    assert job_drafts.list_published_jobs(db, employment_type="full-time").total == 0
    assert job_drafts.list_published_jobs(db, work_location="on-site").total == 1

    with pytest.raises(NotFoundError):
        job_drafts.get_published_job(db, theirs.id)
    assert job_drafts.get_published_job(db, mine_live.id).company_name == "Bean There"

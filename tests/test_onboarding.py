import pytest

from headhuntd.database import SessionLocal
from headhuntd.models.user import User
from headhuntd.schemas.profile import ProfileProjection, normalize_personal_summary


PERSONAL_DETAILS = {"address": "1 George St, Sydney", "mobileNumber": "0411111111", "dateOfBirth": "1995-04-01"}
WORK_EXPERIENCE = {
    "selectedIndustry": "Hospitality",
    "selectedSkills": ["Coffee", "coffee ", "Customer service"],
    "workStatus": "worked-before",
}
AVAILABILITY = {"timePreference": ["morning", "evening"], "noticePreference": "1-week"}


def _set_personal_summary(email: str, value) -> None:
    with SessionLocal() as db:
        user = db.query(User).filter(User.email == email).first()
        user.personal_summary = value
        db.commit()


def test_steps_for_current_user(client, seeker_headers, employer_headers) -> None:
    seeker = client.get("/onboarding/steps", headers=seeker_headers).json()
    assert seeker == {
        "flow": "job-seeker-onboarding",
        "steps": ["personal-details", "personal-summary", "work-experience", "availability"],
        "firstStep": "personal-details",
        "totalSteps": 4,
    }
    employer = client.get("/onboarding/steps", headers=employer_headers).json()
    assert employer["steps"] == ["personal-details", "personal-summary"]


def test_job_seeker_onboarding(client, seeker_headers) -> None:
    response = client.put("/onboarding/personal-details", json=PERSONAL_DETAILS, headers=seeker_headers)
    assert response.status_code == 200
    assert response.json() == {
        "step": "personal-details",
        "nextStep": "personal-summary",
        "completedSteps": ["personal-details"],
        "totalSteps": 4,
    }

    response = client.put("/onboarding/personal-summary", json={"summary": "Barista with 3 years"}, headers=seeker_headers)
    assert response.json()["nextStep"] == "work-experience"

    client.put("/onboarding/work-experience", json=WORK_EXPERIENCE, headers=seeker_headers)
    response = client.put("/onboarding/availability", json=AVAILABILITY, headers=seeker_headers)
    assert response.json()["nextStep"] is None
    assert len(response.json()["completedSteps"]) == 4

    profile = client.get("/onboarding/profile", headers=seeker_headers).json()
    assert profile["isComplete"] is True
    assert profile["completionPercentage"] == 100
    assert profile["mobileNumber"] == "0411111111"
    assert profile["personalSummary"] == {"summary": "Barista with 3 years"}
    assert profile["workExperience"]["selectedSkills"] == ["Coffee", "Customer service"]
    assert profile["availability"]["timePreference"] == ["morning", "evening"]


def test_personal_details_resave_keeps_mobile_number_in_sync(client, seeker_headers) -> None:
    client.put("/onboarding/personal-details", json=PERSONAL_DETAILS, headers=seeker_headers)
    assert client.get("/auth/me", headers=seeker_headers).json()["mobileNumber"] == "0411111111"

    client.put("/onboarding/personal-details", json={"address": "9 King St"}, headers=seeker_headers)
    profile = client.get("/onboarding/profile", headers=seeker_headers).json()
    assert profile["personalDetails"]["mobileNumber"] is None
    assert profile["mobileNumber"] is None
    assert client.get("/auth/me", headers=seeker_headers).json()["mobileNumber"] is None


def test_employer_onboarding_has_two_steps(client, employer_headers) -> None:
    client.put("/onboarding/personal-details", json={"address": "5 Pitt St"}, headers=employer_headers)
    response = client.put(
        "/onboarding/personal-summary",
        json={"summary": "Family cafe since 1999", "companyName": "Bean There", "companySize": "1-10"},
        headers=employer_headers,
    )
    assert response.status_code == 200
    assert response.json()["nextStep"] is None
    assert response.json()["totalSteps"] == 2

    profile = client.get("/onboarding/profile", headers=employer_headers).json()
    assert profile["isComplete"] is True
    assert profile["personalSummary"] == {"summary": "Family cafe since 1999"}
    assert profile["businessSummary"]["companyName"] == "Bean There"

    # Jobs created afterwards pick up the company name.
    job = client.post("/jobs", headers=employer_headers).json()
    assert job["companyName"] == "Bean There"


def test_employer_cannot_save_seeker_steps(client, employer_headers) -> None:
    response = client.put("/onboarding/availability", json=AVAILABILITY, headers=employer_headers)
    assert response.status_code == 400
    assert response.json()["reason"] == "notInFlow"


def test_summary_length_depends_on_role(client, seeker_headers, employer_headers) -> None:
    long_text = {"summary": "x" * 501}
    assert client.put("/onboarding/personal-summary", json=long_text, headers=seeker_headers).status_code == 200

    response = client.put("/onboarding/personal-summary", json=long_text, headers=employer_headers)
    assert response.status_code == 400
    assert response.json()["reason"] == "fieldTooLong"

    response = client.put("/onboarding/personal-summary", json={"summary": "x" * 5001}, headers=seeker_headers)
    assert response.json()["reason"] == "fieldTooLong"


def test_step_validation_errors(client, seeker_headers) -> None:
    response = client.put("/onboarding/personal-details", json={"address": "  "}, headers=seeker_headers)
    assert response.status_code == 400
    assert response.json()["field"] == "address"
    assert response.json()["reason"] == "required"

    response = client.put("/onboarding/availability", json={"timePreference": []}, headers=seeker_headers)
    assert response.json()["reason"] == "required"

    response = client.put("/onboarding/availability", json={"timePreference": ["midnight"]}, headers=seeker_headers)
    assert response.json()["reason"] == "invalid"

    bad_dates = dict(AVAILABILITY, startDate="2024-05-10", endDate="2024-05-01")
    response = client.put("/onboarding/availability", json=bad_dates, headers=seeker_headers)
    assert response.status_code == 400
    assert response.json()["field"] == "endDate"
    assert response.json()["reason"] == "invalid"

    profile = client.get("/onboarding/profile", headers=seeker_headers).json()
    assert profile["completedSteps"] == []
    assert profile["nextStep"] == "personal-details"


def test_legacy_string_summary_is_normalized(client, seeker_headers) -> None:
    _set_personal_summary("seeker@example.com", "Old plain text summary")

    profile = client.get("/onboarding/profile", headers=seeker_headers).json()
    assert profile["personalSummary"] == {"summary": "Old plain text summary"}
    assert "personal-summary" in profile["completedSteps"]


def test_legacy_empty_summary_is_not_complete(client, seeker_headers) -> None:
    _set_personal_summary("seeker@example.com", "")

    profile = client.get("/onboarding/profile", headers=seeker_headers).json()
    assert profile["personalSummary"] == {"summary": ""}
    assert "personal-summary" not in profile["completedSteps"]
    assert profile["completionPercentage"] == 0


@pytest.mark.parametrize(
    "stored, expected",
    [
        (None, None),
        ("text", {"summary": "text"}),
        ("", {"summary": ""}),
        ({"summary": "text"}, {"summary": "text"}),
        ({"summary": None}, {"summary": ""}),
        ({}, {"summary": ""}),
    ],
)
def test_normalize_personal_summary(stored, expected) -> None:
    assert normalize_personal_summary(stored) == expected


def test_projection_coerces_legacy_shape() -> None:
    projection = ProfileProjection(
        id="u1",
        email="a@example.com",
        full_name="A",
        role="job-seeker",
        onboarding_flow="job-seeker-onboarding",
        personal_summary="legacy",
        total_steps=4,
        completion_percentage=25,
        is_complete=False,
    )
    assert projection.personal_summary.summary == "legacy"

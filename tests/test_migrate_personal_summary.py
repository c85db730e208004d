from headhuntd.models.user import User
from headhuntd.services.onboarding import migrate_personal_summaries
from scripts.migrate_personal_summary import main


def _seed(make_user) -> None:
    make_user("legacy@example.com", role="job-seeker", personal_summary="Plain text from the old form")
    make_user("empty@example.com", role="job-seeker", personal_summary="")
    make_user("current@example.com", role="job-seeker", personal_summary={"summary": "Already migrated"})
    make_user("blank@example.com", role="employer")


def _summaries(db) -> dict:
    db.expire_all()
    return {user.email: user.personal_summary for user in db.query(User).all()}


def test_migrates_string_summaries(db, make_user) -> None:
    _seed(make_user)

    assert migrate_personal_summaries(db) == 2
    summaries = _summaries(db)
    assert summaries["legacy@example.com"] == {"summary": "Plain text from the old form"}
    assert summaries["empty@example.com"] == {"summary": ""}
    assert summaries["current@example.com"] == {"summary": "Already migrated"}
    assert summaries["blank@example.com"] is None

    # Second run has nothing left to do.
    assert migrate_personal_summaries(db) == 0


def test_dry_run_writes_nothing(db, make_user) -> None:
    _seed(make_user)

    assert migrate_personal_summaries(db, dry_run=True) == 2
    assert _summaries(db)["legacy@example.com"] == "Plain text from the old form"


def test_cli(db, make_user, capsys) -> None:
    _seed(make_user)

    assert main(["--dry-run"]) == 0
    assert "would migrate 2 user(s)" in capsys.readouterr().out

    assert main([]) == 0
    assert "migrated 2 user(s)" in capsys.readouterr().out
    assert _summaries(db)["legacy@example.com"] == {"summary": "Plain text from the old form"}

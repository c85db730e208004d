from __future__ import annotations

import os
from typing import Any

import pytest
from fastapi.testclient import TestClient


def pytest_configure() -> None:
    # Ensure the SQLAlchemy engine is created against sqlite for tests.
    os.environ["DB_URL"] = "sqlite:///./test.db"
    os.environ["ORM_DB_URL"] = "sqlite:///./test.db"
    os.environ["ORM_USE_MYSQL"] = "false"

    # Ensure local .env cannot leak into tests.
    os.environ["ENVIRONMENT"] = "test"
    os.environ["JWT_SECRET"] = "test-secret"
    os.environ["BCRYPT_ROUNDS"] = "4"
    os.environ["STRIPE_SECRET_KEY"] = ""
    os.environ["CHECKOUT_VERIFY_DELAY_SECONDS"] = "0"


@pytest.fixture()
def reset_db() -> None:
    from headhuntd.database import Base, engine
    import headhuntd.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture()
def client(reset_db: None) -> Any:
    from headhuntd.main import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def db(reset_db: None) -> Any:
    from headhuntd.database import SessionLocal

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(db) -> Any:
    """Insert a user straight into the DB, bypassing the signup endpoint."""
    from headhuntd.models.user import User
    from headhuntd.services.flows import onboarding_flow_for_role
    from headhuntd.utils.password_hash import hash_password

    def _make(email: str, role: str = "employer", full_name: str = "Test User", **fields: Any) -> User:
        user = User(
            email=email,
            password=hash_password("SecretPass123"),
            full_name=full_name,
            role=role,
            onboarding_flow=onboarding_flow_for_role(role).value,
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


def _signup(client: TestClient, email: str, role: str = "job-seeker", **extra: Any) -> dict[str, str]:
    payload = {"email": email, "password": "SecretPass123", "fullName": "Test User", "role": role, **extra}
    response = client.post("/auth/signup", json=payload)
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
def employer_headers(client: TestClient) -> dict[str, str]:
    return _signup(client, "boss@example.com", role="employer")


@pytest.fixture()
def seeker_headers(client: TestClient) -> dict[str, str]:
    return _signup(client, "seeker@example.com", role="job-seeker")

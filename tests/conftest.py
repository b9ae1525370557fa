"""
Shared fixtures.

Every test gets a fresh in-memory SQLite database. The app's get_db
dependency is overridden to hand out sessions on that engine, so both the
JSON API and the dashboard (which calls the API in-process) see the same
data.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobmindr.database import get_db, init_db
from jobmindr.main import app
from jobmindr.schemas import JobApplicationCreate


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, future=True)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    """TestClient bound to the per-test database."""

    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    app.state.api_client = None  # fresh UI cache per test
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def logged_in(client):
    """Client that went through the login form and holds the session cookie."""
    resp = client.post("/login", data={"email": "a@b.com", "password": "anything"})
    assert resp.status_code == 200
    return client


def make_payload(**overrides):
    """A valid wire-format (camelCase) create payload."""
    payload = {
        "jobTitle": "Backend Engineer",
        "companyName": "Google",
        "dateApplied": "2024-03-01",
        "applicationStatus": "Applied",
        "employmentType": "full-time",
        "contactEmail": "hr@google.com",
        "applicationClosingDate": "2024-04-01",
    }
    payload.update(overrides)
    return payload


def make_create(**overrides):
    return JobApplicationCreate.model_validate(make_payload(**overrides))

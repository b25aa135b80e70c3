"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Bearer tokens for test users
- A venue owned by a test user
- Captured (not queued) Celery tasks
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.database import Base, get_db
import app.models  # noqa: F401
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_token(user_id, email=None, expires_in=timedelta(hours=1), audience=None, secret=None):
    """Sign a token the way the hosted auth provider does."""
    claims = {
        "sub": str(user_id),
        "email": email or f"{user_id}@example.com",
        "aud": audience or settings.JWT_AUDIENCE,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(claims, secret or settings.SUPABASE_JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def auth_headers(user_id) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def queued_tasks(monkeypatch):
    """
    Capture tasks the API tries to queue instead of publishing to Redis.
    """
    calls = []

    def fake_queue(task, *args, **kwargs):
        calls.append((task.name, args, kwargs))
        return True

    monkeypatch.setattr("app.api.endpoints.job_postings.queue_task_safely", fake_queue)
    return calls


@pytest.fixture
def client(db_session, queued_tasks):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def owner_id():
    return uuid.uuid4()


@pytest.fixture
def owner_headers(owner_id):
    return auth_headers(owner_id)


@pytest.fixture
def outsider_id():
    return uuid.uuid4()


@pytest.fixture
def outsider_headers(outsider_id):
    return auth_headers(outsider_id)


@pytest.fixture
def venue(client, owner_headers):
    """A venue created through the API, so roles and templates are seeded."""
    response = client.post(
        "/api/v1/venues",
        json={"name": "The Blue Room", "slug": "blue-room", "location": "Austin, TX", "capacity": 400},
        headers=owner_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def sample_staff_data():
    """Sample staff member data for testing"""
    return {
        "name": "Jordan Reyes",
        "email": "jordan@example.com",
        "phone": "555-0100",
        "role": "Bartender",
        "department": "Bar",
        "employment_type": "part_time",
        "hourly_rate": 18.5,
        "performance_rating": 4.2,
    }


@pytest.fixture
def sample_job_data():
    """Sample job posting data for testing"""
    return {
        "title": "Security Lead",
        "description": "Lead the door and floor security team on event nights.",
        "department": "Security",
        "position": "Security Lead",
        "employment_type": "full_time",
        "location": "Austin, TX",
        "salary_min": 22.0,
        "salary_max": 28.0,
        "salary_type": "hourly",
        "requirements": ["2+ years crowd management"],
        "experience_level": "senior",
        "required_certifications": ["Guard Card"],
        "age_requirement": 21,
    }


@pytest.fixture
def sample_shift_data():
    """Sample shift data for testing"""
    return {
        "shift_title": "Friday Bar",
        "shift_date": "2026-11-06",
        "start_time": "18:00:00",
        "end_time": "23:00:00",
        "department": "Bar",
        "staff_needed": 2,
        "hourly_rate": 20.0,
    }


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def headers_for():
    return auth_headers

"""Pytest fixtures and configuration for eisentask tests."""

import os

# Keep the app's module-level engine off the filesystem during tests.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
import uuid

from eisentask.database.database import Base
from eisentask.database import models  # noqa: F401
from eisentask.database.repository import TaskRepository, EligibilityRepository
from eisentask.models.task import Task, Quadrant, Complexity


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def task_repository(db_session: Session):
    """Create a TaskRepository instance for testing."""
    return TaskRepository(db_session)


@pytest.fixture
def eligibility_repository(db_session: Session):
    return EligibilityRepository(db_session)


@pytest.fixture
def sample_task_base():
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    """
    now = datetime.utcnow()
    return {
        "id": str(uuid.uuid4()),
        "text": "Test Task",
        "description": "Test description",
        "quadrant": Quadrant.URGENT_IMPORTANT,
        "complexity": Complexity.MEDIUM,
        "deadline": None,
        "recurrence": None,
        "completed": False,
        "completed_at": None,
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample Task object for testing."""
    return Task(**sample_task_base)


@pytest.fixture
def weekly_task(sample_task_base):
    """Create a task repeating on Mondays and Wednesdays."""
    return Task(**{
        **sample_task_base,
        "text": "Team sync prep",
        "deadline": "2024-05-15",
        "recurrence": {"interval": 1, "unit": "week", "weekDays": [1, 3]},
    })


@pytest.fixture
def test_client(db_session: Session):
    """Create a FastAPI test client with overridden database dependency."""
    from eisentask.api.app import app
    from eisentask.database.database import get_db

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()

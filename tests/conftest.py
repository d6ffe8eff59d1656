"""
Shared fixtures: in-memory SQLite database, an authenticated user and
record builders for the pure analytics/selection stages.
"""
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.db.models.user import User
from app.db.session import get_db
from app.core.dependencies import get_cache
from app.core.security import hash_password, create_access_token
from app.schemas.application import ApplicationRecord, ApplicationStatus
from app.services.backup_service import LocalCache
from app.services.tracker_service import new_id, status_change_event


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

NOW = datetime(2026, 10, 15, 12, 0, tzinfo=timezone.utc)


def override_get_db():
    """Override get_db dependency for testing."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the database dependency
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function", autouse=True)
def setup_db():
    """Create and drop tables for each test."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(autouse=True)
def cache_dir(tmp_path):
    """Point the local backup cache at a per-test directory."""
    directory = tmp_path / "cache"
    app.dependency_overrides[get_cache] = lambda: LocalCache(directory)
    yield directory
    app.dependency_overrides.pop(get_cache, None)


@pytest.fixture
def db_session():
    """Provide a database session for tests."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def test_user(db_session):
    """Create a test user."""
    user = User(
        full_name="Test User",
        email="test@example.com",
        password_hash=hash_password("testpass123"),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user):
    """Bearer header for the test user."""
    token = create_access_token({"sub": test_user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_application():
    """
    Build an ApplicationRecord without touching the store.

    The timeline defaults to the creation event for the given status.
    """
    def _make(
        status=ApplicationStatus.APPLIED,
        company_name=None,
        position=None,
        created_at=NOW,
        updated_at=None,
        tags=(),
        deleted=False,
        timeline=None,
        **fields,
    ):
        status = ApplicationStatus(status)
        return ApplicationRecord(
            id=fields.pop("id", new_id()),
            user_id="1",
            resume_details=fields.pop("resume_details", "Python developer"),
            job_description=fields.pop("job_description", "Backend role"),
            status=status,
            company_name=company_name,
            position=position,
            tags=list(tags),
            timeline=timeline if timeline is not None else [status_change_event(None, status, created_at)],
            created_at=created_at,
            updated_at=updated_at or created_at,
            deleted=deleted,
            **fields,
        )

    return _make

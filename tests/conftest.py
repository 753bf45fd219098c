from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.datetime_utils import utcnow
from app.main import create_app
from app.schemas.match_schemas import MatchCreate
from app.schemas.user_schemas import UserCreate
from app.storage.memory import MemStorage
from app.storage.sql import SqlStorage


@pytest.fixture
def storage():
    return MemStorage()


@pytest.fixture(params=["memory", "sql"])
def any_storage(request, tmp_path):
    """Runs a test once against each storage backend."""
    if request.param == "memory":
        return MemStorage()
    return SqlStorage(f"sqlite:///{tmp_path / 'attendance_test.db'}")


@pytest.fixture
def make_user():
    counter = {"n": 0}

    def _make_user(store, name=None, is_admin=False):
        counter["n"] += 1
        n = counter["n"]
        return store.create_user(
            UserCreate(
                email=f"player{n}@example.com",
                name=name or f"Player {n}",
                provider="google",
                provider_id=f"google-{n}",
                is_admin=is_admin,
            )
        )

    return _make_user


@pytest.fixture
def make_match():
    def _make_match(store, days_from_now=7, opponent="Rivals FC", created_by=1):
        return store.create_match(
            MatchCreate(
                date=utcnow() + timedelta(days=days_from_now),
                time="19:30",
                opponent=opponent,
                location="Central Park",
                created_by=created_by,
            )
        )

    return _make_match


@pytest.fixture
def test_settings():
    return Settings(
        SESSION_SECRET="test-secret",
        STORAGE_BACKEND="memory",
        MOCK_LOGIN_ENABLED=True,
        SEED_DEMO_DATA=False,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def app(test_settings, storage):
    return create_app(settings=test_settings, storage=storage)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def admin_client(app):
    """Logged in as the google demo user, who is an admin."""
    client = TestClient(app)
    response = client.post("/api/auth/mock-login/google")
    assert response.status_code == 200
    return client


@pytest.fixture
def member_client(app):
    """Logged in as the microsoft demo user, a regular team member."""
    client = TestClient(app)
    response = client.post("/api/auth/mock-login/microsoft")
    assert response.status_code == 200
    return client

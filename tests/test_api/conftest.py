"""
Fixtures for API route tests.

Routes run against the real application with the database session, the
current user and object storage replaced through dependency overrides.
"""

import pytest
from fastapi.testclient import TestClient

from medclaims.api.deps import get_current_user
from medclaims.api.main import app
from medclaims.db.connection import get_session
from medclaims.services.notifications import NotificationCenter
from medclaims.services.storage import get_storage


@pytest.fixture(autouse=True)
def reset_app_state():
    """Ensure dependency overrides and notifications are isolated per test."""
    app.dependency_overrides.clear()
    app.state.notifications = NotificationCenter()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def api_session(fake_session):
    """Serve every request from the same FakeSession."""

    async def _override():
        yield fake_session

    app.dependency_overrides[get_session] = _override
    return fake_session


@pytest.fixture
def api_storage(fake_storage):
    app.dependency_overrides[get_storage] = lambda: fake_storage
    return fake_storage


@pytest.fixture
def login_as(api_session):
    """Authenticate requests as the given user."""

    def _login(user):
        app.dependency_overrides[get_current_user] = lambda: user
        return user

    return _login


@pytest.fixture
def notifications() -> NotificationCenter:
    return app.state.notifications

"""Shared fixtures for the taskboard test-suite."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Callable

import pytest

TEST_DB_PATH = Path(tempfile.gettempdir()) / "taskboard_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["ADMIN_CHANNEL"] = "private-admin"

from taskboard.config import get_settings  # noqa: E402

get_settings.cache_clear()

from taskboard.application.live import ConnectionState, SubscriptionForbidden  # noqa: E402
from taskboard.application.use_cases.users import create_user  # noqa: E402
from taskboard.domain.entities import ROLE_ADMIN, ROLE_USER, User  # noqa: E402
from taskboard.infrastructure import models  # noqa: E402,F401
from taskboard.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "AdminSecret1"
USER_PASSWORD = "Secret123"


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure the test database starts from a clean state for each test."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


def make_user(
    *,
    email: str,
    password: str = USER_PASSWORD,
    name: str = "Test User",
    role: str = ROLE_USER,
    approved: bool = True,
) -> User:
    """Insert a user directly through the use case layer."""

    with SessionLocal() as session:
        return create_user(
            session,
            name=name,
            email=email,
            password=password,
            role=role,
            approved=approved,
        )


@pytest.fixture()
def admin_user() -> User:
    return make_user(
        email=ADMIN_EMAIL, password=ADMIN_PASSWORD, name="Admin", role=ROLE_ADMIN
    )


@pytest.fixture()
def client():
    """Return a test client bound to a clean application instance."""

    from fastapi.testclient import TestClient

    from main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


def login(client, email: str, password: str) -> dict[str, str]:
    response = client.post("/auth/token", data={"username": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
def admin_headers(client, admin_user) -> dict[str, str]:
    return login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture()
def user_factory(client) -> Callable[..., tuple[User, dict[str, str]]]:
    """Create an approved user and return it with its auth headers."""

    def _create(email: str, name: str = "Test User") -> tuple[User, dict[str, str]]:
        user = make_user(email=email, name=name)
        return user, login(client, email, USER_PASSWORD)

    return _create


class FakeTransport:
    """In-memory transport recording joins and letting tests push events."""

    def __init__(self) -> None:
        self.forbidden: set[str] = set()
        self.failing: set[str] = set()
        self.deliverers: dict[str, Callable[[str, Any], None]] = {}
        self.joined: list[str] = []
        self.left: list[str] = []
        self.connects = 0
        self.disconnects = 0

    def connect(self, on_state) -> None:
        self.connects += 1
        on_state(ConnectionState.CONNECTED, None)

    async def join(self, channel_name: str, deliver) -> None:
        if channel_name in self.forbidden:
            raise SubscriptionForbidden(channel_name)
        if channel_name in self.failing:
            raise ConnectionError("Connection refused")
        self.joined.append(channel_name)
        self.deliverers[channel_name] = deliver

    def leave(self, channel_name: str) -> None:
        self.left.append(channel_name)
        self.deliverers.pop(channel_name, None)

    def disconnect(self) -> None:
        self.disconnects += 1

    def emit(self, channel_name: str, event: str, data: Any) -> None:
        self.deliverers[channel_name](event, data)


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def login_as(client) -> Callable[[str, str], dict[str, str]]:
    """Return a helper that signs in and builds bearer headers."""

    return lambda email, password=USER_PASSWORD: login(client, email, password)


@pytest.fixture()
def make_account() -> Callable[..., User]:
    return make_user

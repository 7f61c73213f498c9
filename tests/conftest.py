from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from fitcoach_api.app.core.config import Settings
from fitcoach_api.app.main import create_app

COACH_EMAIL = "coach@fitcoachpro.com"
COACH_PASSWORD = "coach123"
ADMIN_EMAIL = "admin@fitcoachpro.com"
ADMIN_PASSWORD = "admin123"

# Fixture workouts are all on 2024-11-01 at 09:00, 11:00 and 14:00.
START = datetime(2024, 11, 1, 8, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


def parse_time(value: str) -> datetime:
    """Parse an ISO 8601 timestamp as serialised by the API."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def make_settings(**overrides) -> Settings:
    values = {"rate_limit_enabled": False, "seed_fixtures": True, "api_prefix": "/api"}
    values.update(overrides)
    return Settings(**values)


def login(client: TestClient, email: str, password: str) -> dict:
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


def register(client: TestClient, email: str, name: str = "Second Coach", password: str = "secret123") -> dict:
    resp = client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "name": name, "role": "coach"},
    )
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def app(clock):
    return create_app(make_settings(), clock=clock)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client) -> dict:
    return login(client, COACH_EMAIL, COACH_PASSWORD)


@pytest.fixture
def admin_headers(client) -> dict:
    return login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def other_coach_headers(client) -> dict:
    return register(client, "second.coach@fitcoachpro.com")

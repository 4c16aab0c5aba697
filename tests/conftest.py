from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from hotspot_gate.api.deps import get_clock, get_settings
from hotspot_gate.config import Settings
from hotspot_gate.main import create_app

TEST_SECRET = "test-hotspot-secret"
CLIENT_IP = "10.0.0.23"
T0 = 1_700_000_000_000


class FakeClock:
    """Millisecond clock the tests can move by hand."""

    def __init__(self, now: int = T0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def settings() -> Settings:
    return Settings(
        HOTSPOT_SECRET=TEST_SECRET,
        APP_REDIRECT_URL="https://app.example/",
        PORTAL_URL="http://10.0.0.1/portal.html",
        RATE_LIMIT_MAX_REQUESTS=20,
        MAX_RETRIES=1,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def app(settings, clock):
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_clock] = lambda: clock
    return app


@pytest.fixture
def client(app) -> TestClient:
    with TestClient(
        app,
        headers={"X-Forwarded-For": CLIENT_IP},
        follow_redirects=False,
    ) as c:
        yield c

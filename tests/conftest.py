"""Shared test fixtures."""

import os

# Settings are read at import time; AUTH_SECRET has no default
os.environ.setdefault("AUTH_SECRET", "test-secret-not-for-production-0123456789")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.vt_gateway.ratelimit import registry
from src.vt_gateway.ratelimit.memory import InMemoryRateLimiter
from tests.helpers import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def isolated_rate_limiter(monkeypatch: pytest.MonkeyPatch) -> InMemoryRateLimiter:
    """Fresh process-wide limiter per test; no sweep task is started."""
    limiter = InMemoryRateLimiter()
    monkeypatch.setattr(registry, "_limiter", limiter)
    return limiter


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

"""Pytest configuration and fixtures for catalog tests.

Every test gets a freshly built application, so repositories and token
secrets never leak between tests.
"""

import os
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

# Set test environment variables before importing catalog modules
os.environ["JWT_SECRET_KEY"] = "test-secret-key-" + "0" * 32
os.environ["LOG_LEVEL"] = "DEBUG"

TEST_SECRET = os.environ["JWT_SECRET_KEY"]
TEST_SUBJECT = 999


class FakeClock:
    """Controllable replacement for the token service clock."""

    def __init__(self, now: datetime | None = None):
        self.now = now or datetime.now(UTC).replace(microsecond=0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture
def test_settings():
    """Settings isolated from any local .env file."""
    from catalog.core.config import Settings

    return Settings(_env_file=None, jwt_secret_key=TEST_SECRET)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def token_service(clock):
    from catalog.services.tokens import TokenService

    return TokenService(TEST_SECRET, clock=clock)


@pytest.fixture
def repository():
    from catalog.services.products import ProductRepository

    return ProductRepository()


@pytest.fixture
def app(test_settings, repository, token_service) -> FastAPI:
    """Application whose login always succeeds."""
    from catalog.main import create_app
    from catalog.services.login import StaticVerifier

    return create_app(
        test_settings,
        repository=repository,
        token_service=token_service,
        credential_verifier=StaticVerifier(True),
    )


@pytest.fixture
def client(app) -> TestClient:
    """Synchronous test client. Does not run the lifespan, so logging is left alone."""
    return TestClient(app)


@pytest_asyncio.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async test client over the ASGI transport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers(token_service) -> dict[str, str]:
    """Authorization header carrying a valid access token."""
    token = token_service.issue_access_token(TEST_SUBJECT)
    return {"Authorization": f"Bearer {token}"}

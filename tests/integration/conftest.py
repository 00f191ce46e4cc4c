"""Integration-test fixtures.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and Redis pool (both created at import time)
remain valid across the entire test session.
"""

import uuid
from collections.abc import Awaitable, Callable
from datetime import date

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.main import app

PASSWORD = "IntegPass1"


def unique_username() -> str:
    """Eleven characters, unique per call."""
    return f"it{uuid.uuid4().hex[:9]}"


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client: keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session")
async def make_user(
    client: AsyncClient,
) -> Callable[[], Awaitable[dict[str, str]]]:
    """Factory: sign up and sign in a fresh user, return id, username and auth header."""

    async def _make() -> dict[str, str]:
        username = unique_username()
        signup = await client.post("/api/v1/users/signup", json={
            "username": username,
            "password": PASSWORD,
            "birthdate": date(1990, 5, 17).isoformat(),
        })
        assert signup.status_code == 201, signup.text
        signin = await client.post("/api/v1/users/signin", json={
            "username": username,
            "password": PASSWORD,
        })
        assert signin.status_code == 200, signin.text
        token = signin.json()["data"]["token"]
        return {
            "id": signup.json()["data"]["id"],
            "username": username,
            "authorization": f"Bearer {token}",
        }

    return _make

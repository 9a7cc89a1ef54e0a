"""Pytest fixtures for forum backend tests."""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-at-least-32-bytes"

from typing import AsyncGenerator, Callable

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import async_session_maker, close_db, init_db
from app.core.security import create_access_token
from app.main import app
from app.models.user import User


@pytest.fixture(autouse=True)
async def database() -> AsyncGenerator[None, None]:
    """Fresh in-memory database per test."""
    await init_db()
    yield
    # Disposing drops the in-memory database with its only connection
    await close_db()


@pytest.fixture
async def session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session


@pytest.fixture
async def client() -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test/api") as c:
        yield c


@pytest.fixture
async def users() -> dict[str, int]:
    """Seed two users: one with an avatar, one without."""
    async with async_session_maker() as session:
        alice = User(name="Alice", email="alice@example.com", avatar="/avatars/alice.png")
        bob = User(name="Bob", email="bob@example.com", avatar=None)
        session.add_all([alice, bob])
        await session.commit()
        return {"alice": alice.id, "bob": bob.id}


@pytest.fixture
def auth_headers() -> Callable[[int], dict[str, str]]:
    def _headers(user_id: int) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _headers

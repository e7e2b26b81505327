"""Pytest configuration and shared fixtures.

- In-memory SQLite (aiosqlite) engine per test with all tables created
- Async session fixture for repository tests
- httpx client against the FastAPI app with the DB session overridden
"""

# Set environment variables BEFORE any imports that trigger Settings loading
import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from collections.abc import AsyncGenerator, Generator
from datetime import date
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from hero_api.database.database import get_async_db_session
from hero_api.database.model.hero import Hero
from hero_api.hero.schema import HeroCreate
from hero_api.main import app

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(autouse=True)
def _disable_rate_limiter() -> Generator[None]:
    """Disable slowapi rate limiting for all tests."""
    with patch("hero_api.common.ratelimit.limiter.enabled", False):
        yield


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine]:
    """Create a fresh in-memory database engine for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide a database session for each test."""
    async with AsyncSession(test_engine, expire_on_commit=False) as session:
        yield session


@pytest_asyncio.fixture
async def client(test_engine: AsyncEngine) -> AsyncGenerator[AsyncClient]:
    """HTTP client for the app; every request gets its own session on the test DB."""

    async def _session_override() -> AsyncGenerator[AsyncSession]:
        async with AsyncSession(test_engine, expire_on_commit=False) as session:
            yield session

    app.dependency_overrides[get_async_db_session] = _session_override
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def make_hero_create(**overrides: object) -> HeroCreate:
    """Build a valid HeroCreate; keyword overrides use field names."""
    values: dict[str, object] = {
        "name": "Barry Allen",
        "nickname": "the-flash",
        "date_of_birth": date(1990, 3, 29),
        "universe": "DC",
        "main_power": "Speed Force",
        "avatar_url": "http://example.com/flash.jpg",
    }
    values.update(overrides)
    return HeroCreate.model_validate(values)


def make_hero(**overrides: object) -> Hero:
    """Build an unsaved Hero model instance."""
    data = make_hero_create().model_dump()
    data.update(overrides)
    return Hero(**data)


@pytest.fixture
def hero_payload() -> dict[str, str]:
    """Valid create request body (camelCase wire names)."""
    return {
        "name": "Integration Test Hero",
        "nickname": "Integrator",
        "dateOfBirth": "1995-05-15",
        "universe": "TestVerse",
        "mainPower": "Testing",
        "avatarUrl": "http://example.com/avatar.jpg",
    }

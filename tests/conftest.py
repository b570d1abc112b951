"""Pytest fixtures for unit and integration tests."""
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.config import get_settings
from app.database import get_db
from app.main import app
from app.models.base import Base

# In-memory SQLite stands in for MariaDB; the schema comes from the ORM metadata
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_USER_ID = "admin-1"


@pytest_asyncio.fixture
async def test_engine():
    """Fresh database per test so cases and statistics never leak between tests."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    TestSession = async_sessionmaker(
        bind=test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with TestSession() as session:
        yield session
        await session.rollback()


@pytest.fixture
def admin_user(monkeypatch) -> str:
    """Register ADMIN_USER_ID as the only admin for the duration of a test."""
    monkeypatch.setattr(get_settings(), "ADMIN_USER_IDS", ADMIN_USER_ID)
    return ADMIN_USER_ID


@pytest_asyncio.fixture
async def client(db) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client on the ASGI app; requests share the test session and never commit."""
    app.dependency_overrides[get_db] = lambda: db
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
    app.dependency_overrides.clear()

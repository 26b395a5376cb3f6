"""
Pytest fixtures for testing
"""
import asyncio
from datetime import date
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from fundytrack.main import app
from fundytrack.api.v1 import deps
from fundytrack.db.base_class import Base
from fundytrack.db import models  # noqa: F401  (registers the tables on Base.metadata)


TODAY = date(2025, 11, 10)


@pytest.fixture
def today():
    """Reference day used by month-scoped endpoints in tests"""
    return TODAY


@pytest.fixture
def current_user():
    """Authenticated user as returned by get_current_user"""
    return SimpleNamespace(
        id=1,
        google_id="google-sub-1",
        email="ann@example.com",
        name="Ann",
        avatar_url=None,
        created_at=None,
    )


@pytest.fixture
def mock_db():
    """Request session; every gateway call on it is patched in the tests"""
    return AsyncMock()


@pytest.fixture
def client(current_user, mock_db, today):
    """Test client with the session, the user and the clock overridden"""
    app.dependency_overrides[deps.get_async_db] = lambda: mock_db
    app.dependency_overrides[deps.get_optional_user] = lambda: current_user
    app.dependency_overrides[deps.get_current_user] = lambda: current_user
    app.dependency_overrides[deps.get_today] = lambda: today
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(mock_db):
    """Test client that goes through the real identity check"""
    app.dependency_overrides[deps.get_async_db] = lambda: mock_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def run_db():
    """
    Run an async scenario against a fresh in-memory SQLite database.

    The scenario receives an AsyncSession; the gateway functions only flush,
    so everything stays inside one transaction that is discarded afterwards.
    """
    def _run(scenario):
        async def _main():
            engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            session_factory = async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
            try:
                async with session_factory() as session:
                    return await scenario(session)
            finally:
                await engine.dispose()

        return asyncio.run(_main())

    return _run

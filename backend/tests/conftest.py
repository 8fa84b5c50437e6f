"""
Acme Ice Cream API: Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures (function-scoped):
    ├── mock_db_session: Mock AsyncSession for service unit tests
    ├── test_settings:   Settings pointing at a temporary SQLite database
    ├── test_app:        App built from test_settings, lifespan running
    └── test_client:     HTTPX AsyncClient bound to test_app
"""

import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Keep test output quiet; set before the settings singleton is created
os.environ["LOG_LEVEL"] = "WARNING"

from icecream_api.config import Settings  # noqa: E402
from icecream_api.main import create_app  # noqa: E402


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_update(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = None
            assert await service.update_flavor(mock_db_session, 1, "X") is None
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.execute.return_value = MagicMock()
    return session


@pytest.fixture
def sample_flavor():
    """A flavor-shaped object as returned by the ORM."""
    flavor = MagicMock()
    flavor.id = 1
    flavor.name = "Coconut"
    flavor.updated_at = datetime.now(timezone.utc)
    return flavor


@pytest.fixture
def test_settings(tmp_path):
    """Settings for a throwaway SQLite database (fresh per test)."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'flavors.db'}",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def test_app(test_settings):
    """
    The FastAPI app with its lifespan entered.

    ASGITransport does not send lifespan events, so the startup routine
    (schema reset + seed) is run here explicitly.
    """
    app = create_app(test_settings)
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    HTTPX AsyncClient routed directly to the app.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/flavors")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

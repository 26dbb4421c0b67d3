"""
AI Productivity Hub Backend — Test Configuration (conftest.py)
===============================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Reusable infrastructure: explicit Settings, a mocked DB session and an
       HTTP client bound to an app built around those settings.
How:   Apps are created with create_app(settings); the database session
       dependency is overridden so no real database is needed.

Fixture Hierarchy:
    ├── settings:         Settings with CRON_SECRET="s3cr3t" and an admin key
    ├── mock_db_session:  AsyncMock standing in for AsyncSession
    ├── make_client:      builds an AsyncClient for any (settings, session) pair
    └── test_client:      AsyncClient for the default settings + mock session
"""

import os
import tempfile
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before any prodhub import: prodhub.main builds an app at import time
_tmp_dir = tempfile.mkdtemp(prefix="prodhub_test_")
TEST_DATABASE_URL = f"sqlite+aiosqlite:///{_tmp_dir}/test.db"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["LOG_LEVEL"] = "WARNING"
for _name in ("CRON_SECRET", "ADMIN_KEY", "NEXT_PUBLIC_ADMIN_KEY", "CRON_ALLOW_QUERY_SECRET"):
    os.environ.pop(_name, None)

from prodhub.config import Settings  # noqa: E402
from prodhub.database import get_db_session  # noqa: E402
from prodhub.main import create_app  # noqa: E402

CRON_SECRET = "s3cr3t"
ADMIN_KEY = "adm1n-key"


def make_settings(**overrides) -> Settings:
    """Settings isolated from any .env file in the working directory."""
    values = {
        "database_url": TEST_DATABASE_URL,
        "cron_secret": CRON_SECRET,
        "admin_key": ADMIN_KEY,
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def query_result(scalars=None, rows=None, one=None):
    """A MagicMock shaped like an SQLAlchemy Result (`one` feeds scalar_one_or_none)."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = list(scalars or [])
    result.all.return_value = list(rows or [])
    result.scalar.return_value = None
    result.scalar_one_or_none.return_value = one
    return result


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def mock_db_session():
    """
    A mock async session whose queries return empty results by default.

    Usage:
        mock_db_session.execute.return_value = query_result(scalars=[profile])
    """
    session = AsyncMock()
    session.execute = AsyncMock(return_value=query_result())
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.begin_nested = MagicMock()
    return session


@pytest.fixture
def make_client():
    """
    Factory for HTTP clients bound to a fresh app.

    Usage:
        async with make_client(settings, session) as client:
            response = await client.get("/api/cron-weekly")
    """

    @asynccontextmanager
    async def _make(app_settings, session=None, overrides=None):
        app = create_app(app_settings)

        if session is not None:
            async def _session_override():
                yield session

            app.dependency_overrides[get_db_session] = _session_override

        for dependency, provider in (overrides or {}).items():
            app.dependency_overrides[dependency] = provider

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client

        await app.state.engine.dispose()

    return _make


@pytest_asyncio.fixture
async def test_client(make_client, settings, mock_db_session):
    async with make_client(settings, mock_db_session) as client:
        yield client

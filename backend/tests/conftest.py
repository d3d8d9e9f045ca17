"""Shared pytest fixtures and configuration."""

import os

import pytest
from httpx import ASGITransport, AsyncClient

# Set test environment variables
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_FORMAT", "console")
os.environ.setdefault("HIGH_VALUE_LEAD_THRESHOLD", "500000")
os.environ.setdefault("NOTIFICATION_TTL_DAYS", "30")

from realty_crm.database import Database  # noqa: E402
from realty_crm.main import create_application  # noqa: E402
from realty_crm.models.user import UserRole  # noqa: E402

from tests.utils.factories import create_user  # noqa: E402


@pytest.fixture
async def database(tmp_path):
    """A fresh SQLite database with every table created."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'crm.db'}")
    await database.create_all()
    yield database
    await database.dispose()


@pytest.fixture
def app(database):
    return create_application(database)


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def super_admin(database):
    return await create_user(database, role=UserRole.SUPER_ADMIN, name="Sadia Super")


@pytest.fixture
async def admin(database):
    return await create_user(database, role=UserRole.ADMIN, name="Arif Admin")


@pytest.fixture
async def agent_user(database):
    return await create_user(database, role=UserRole.AGENT, name="Nadia Agent")


@pytest.fixture
async def end_user(database):
    return await create_user(database, role=UserRole.USER)

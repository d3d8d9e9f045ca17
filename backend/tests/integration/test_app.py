"""Tests for the application shell and bootstrap scripts."""

import pytest
from sqlalchemy import select

from realty_crm.core.config import settings
from realty_crm.models.user import AuthProvider, User, UserRole
from realty_crm.tasks import celery_app

from init_superuser import init_superuser

pytestmark = pytest.mark.integration


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": settings.VERSION}


async def test_validation_errors_are_unprocessable(client):
    response = await client.post("/api/auth/register", json={"email": "not-an-email"})
    assert response.status_code == 422


async def test_init_superuser_runs_once(database):
    assert await init_superuser(database) is True
    assert await init_superuser(database) is False

    async with database.session_factory() as session:
        result = await session.execute(select(User).where(User.role == UserRole.SUPER_ADMIN))
        users = result.scalars().all()

    assert len(users) == 1
    assert users[0].email == settings.FIRST_SUPERUSER_EMAIL.lower()
    assert users[0].auth_provider == AuthProvider.JWT


def test_purge_is_scheduled_daily():
    schedule = celery_app.conf.beat_schedule["purge-expired-notifications"]
    assert schedule["task"] == "purge_expired_notifications"

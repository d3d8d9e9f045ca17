"""Tests for the role-scoped dashboards."""

from datetime import datetime

import pytest

from realty_crm.models.property import PropertyType
from realty_crm.models.task import TaskPriority, TaskStatus
from realty_crm.services.dashboard import DashboardService

from tests.utils.factories import (
    auth_headers,
    create_agent_profile,
    create_customer,
    create_property,
    create_task,
)

pytestmark = pytest.mark.integration


async def test_super_admin_slice(client, database, super_admin, admin, agent_user, end_user):
    await create_property(database, admin, published_to_frontend=True)
    await create_property(database, admin, property_type=PropertyType.HOUSE)
    await create_customer(database, admin)
    await create_task(database, admin, assigned_to=agent_user)

    response = await client.get("/api/dashboard/stats", headers=auth_headers(super_admin))
    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "super_admin"
    assert body["overview"] == {
        "total_properties": 2,
        "published_properties": 1,
        "total_customers": 1,
        "total_tasks": 1,
        "total_agents": 1,
        "total_admins": 1,
        "total_users": 1,
    }
    assert len(body["recent_properties"]) == 2
    assert {p["name"]: p["value"] for p in body["charts"]["properties_by_type"]} == {
        "apartment": 1,
        "house": 1,
    }
    assert len(body["charts"]["monthly_stats"]) == 6


async def test_admin_slice_counts_own_records(client, database, super_admin, admin, agent_user):
    await create_property(database, admin)
    await create_property(database, super_admin)
    await create_task(database, admin, assigned_to=agent_user, status=TaskStatus.COMPLETED)

    response = await client.get("/api/dashboard/stats", headers=auth_headers(admin))
    body = response.json()
    assert body["role"] == "admin"
    assert body["overview"]["total_properties"] == 2
    assert body["overview"]["my_properties"] == 1
    assert body["overview"]["my_tasks"] == 1
    assert body["charts"]["tasks_by_status"] == [{"name": "completed", "value": 1}]
    assert "total_admins" not in body["overview"]


async def test_agent_slice_uses_profile_membership(client, database, admin, agent_user):
    await create_agent_profile(database, agent_user, total_sales=1_500_000)
    prop = await create_property(database, admin)
    await client.patch(
        f"/api/properties/{prop.id}/assign-agent",
        json={"agent_id": str(agent_user.id)},
        headers=auth_headers(admin),
    )
    await create_task(database, admin, assigned_to=agent_user, priority=TaskPriority.HIGH)
    await create_task(database, agent_user, status=TaskStatus.COMPLETED)
    await create_task(database, admin)

    response = await client.get("/api/dashboard/stats", headers=auth_headers(agent_user))
    body = response.json()
    assert body["role"] == "agent"
    assert body["has_profile"] is True
    assert body["overview"]["assigned_properties"] == 1
    assert body["overview"]["total_tasks"] == 2
    assert body["overview"]["completed_tasks"] == 1
    assert body["overview"]["pending_tasks"] == 1
    assert body["overview"]["total_sales"] == 1_500_000
    assert [p["id"] for p in body["assigned_properties"]] == [str(prop.id)]


async def test_agent_without_profile_gets_zeros(client, agent_user):
    response = await client.get("/api/dashboard/stats", headers=auth_headers(agent_user))
    body = response.json()
    assert body["has_profile"] is False
    assert body["overview"]["assigned_customers"] == 0
    assert body["assigned_customers"] == []


async def test_end_users_have_no_dashboard(client, end_user):
    response = await client.get("/api/dashboard/stats", headers=auth_headers(end_user))
    assert response.status_code == 403


async def test_role_endpoints_reject_other_roles(client, admin, agent_user):
    response = await client.get("/api/dashboard/super-admin/stats", headers=auth_headers(admin))
    assert response.status_code == 403

    response = await client.get("/api/dashboard/admin/stats", headers=auth_headers(admin))
    assert response.status_code == 200

    response = await client.get("/api/dashboard/agent/stats", headers=auth_headers(agent_user))
    assert response.status_code == 200


async def test_monthly_stats_are_zero_filled_oldest_first(database, admin):
    await create_property(database, admin, created_at=datetime(2026, 3, 10))
    await create_property(database, admin, created_at=datetime(2026, 3, 20))
    await create_customer(database, admin, created_at=datetime(2025, 12, 31, 23, 0))
    await create_customer(database, admin, created_at=datetime(2025, 9, 30))

    async with database.session_factory() as session:
        series = await DashboardService(session).monthly_stats(now=datetime(2026, 4, 15))

    assert [(m["month"], m["year"]) for m in series] == [
        ("Nov", 2025), ("Dec", 2025), ("Jan", 2026), ("Feb", 2026), ("Mar", 2026), ("Apr", 2026),
    ]
    assert series[1] == {"month": "Dec", "year": 2025, "properties": 0, "customers": 1}
    assert series[4]["properties"] == 2
    assert sum(m["customers"] for m in series) == 1

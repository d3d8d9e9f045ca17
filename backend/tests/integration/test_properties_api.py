"""Tests for the property endpoints and agent assignment."""

import uuid

import pytest

from realty_crm.models.notification import NotificationType
from realty_crm.models.property import Property, PropertyType

from tests.utils.factories import auth_headers, create_agent_profile, create_property
from tests.utils.helpers import agent_profile, load, notifications_for

pytestmark = pytest.mark.integration


def property_payload(**overrides):
    payload = {
        "name": "Banani Lake Terrace",
        "price": 1_250_000,
        "location": "Banani, Dhaka",
        "type": "Apartment",
        "square_feet": 1450,
        "bedrooms": 3,
        "bathrooms": 2,
    }
    payload.update(overrides)
    return payload


async def test_admin_creates_unpublished_property_and_admins_are_told(
    client, database, super_admin, admin
):
    response = await client.post(
        "/api/properties/", json=property_payload(), headers=auth_headers(admin)
    )
    assert response.status_code == 201
    body = response.json()
    assert body["type"] == "apartment"
    assert body["published_to_frontend"] is False
    assert body["uploaded_by_id"] == str(admin.id)

    for recipient in (super_admin, admin):
        notifications = await notifications_for(database, recipient.id, NotificationType.PROPERTY_ADDED)
        assert len(notifications) == 1
        assert notifications[0].message == "New property added: Banani Lake Terrace - ৳1,250,000"


async def test_agent_cannot_create_property(client, agent_user):
    response = await client.post(
        "/api/properties/", json=property_payload(), headers=auth_headers(agent_user)
    )
    assert response.status_code == 403


async def test_public_listing_only_shows_published(client, database, admin):
    await create_property(database, admin, name="Hidden Villa")
    await create_property(database, admin, name="Shown Duplex", published_to_frontend=True)

    response = await client.get("/api/properties/")
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert body["limit"] == 10
    assert [item["name"] for item in body["items"]] == ["Shown Duplex"]


async def test_public_listing_filters(client, database, admin):
    await create_property(database, admin, name="Cheap Flat", price=900_000, published_to_frontend=True)
    await create_property(
        database, admin, name="Gulshan House", price=4_000_000, property_type=PropertyType.HOUSE,
        location="Gulshan", published_to_frontend=True,
    )

    response = await client.get("/api/properties/", params={"type": "house"})
    assert [item["name"] for item in response.json()["items"]] == ["Gulshan House"]

    response = await client.get("/api/properties/", params={"max_price": 1_000_000})
    assert [item["name"] for item in response.json()["items"]] == ["Cheap Flat"]

    response = await client.get("/api/properties/", params={"search": "gulshan"})
    assert response.json()["total"] == 1


async def test_get_property_counts_views(client, database, admin):
    prop = await create_property(database, admin)

    await client.get(f"/api/properties/{prop.id}")
    response = await client.get(f"/api/properties/{prop.id}")
    assert response.status_code == 200
    assert response.json()["view_count"] == 2


async def test_unknown_property_is_not_found(client):
    response = await client.get(f"/api/properties/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json() == {"detail": "Property not found"}


async def test_only_super_admin_publishes_and_deletes(client, database, super_admin, admin):
    prop = await create_property(database, admin)

    response = await client.patch(f"/api/properties/{prop.id}/publish", headers=auth_headers(admin))
    assert response.status_code == 403

    response = await client.patch(
        f"/api/properties/{prop.id}/publish", headers=auth_headers(super_admin)
    )
    assert response.json()["published_to_frontend"] is True

    response = await client.delete(f"/api/properties/{prop.id}", headers=auth_headers(admin))
    assert response.status_code == 403

    response = await client.delete(f"/api/properties/{prop.id}", headers=auth_headers(super_admin))
    assert response.status_code == 200
    assert await load(database, Property, prop.id) is None


async def test_marking_sold_notifies_admins_once(client, database, super_admin, admin):
    prop = await create_property(database, admin)
    headers = auth_headers(admin)

    await client.put(f"/api/properties/{prop.id}", json={"status": "sold"}, headers=headers)
    await client.put(f"/api/properties/{prop.id}", json={"status": "sold"}, headers=headers)

    sold = await notifications_for(database, super_admin.id, NotificationType.PROPERTY_SOLD)
    assert len(sold) == 1
    assert sold[0].title == "🎉 Property Sold"


async def test_assign_agent_is_idempotent(client, database, admin, agent_user):
    await create_agent_profile(database, agent_user)
    prop = await create_property(database, admin)
    headers = auth_headers(admin)

    for _ in range(2):
        response = await client.patch(
            f"/api/properties/{prop.id}/assign-agent",
            json={"agent_id": str(agent_user.id)},
            headers=headers,
        )
        assert response.status_code == 200
        assert response.json()["assigned_agent_id"] == str(agent_user.id)

    agent = await agent_profile(database, agent_user.id)
    assert agent.assigned_property_ids == [prop.id]

    assigned = await notifications_for(database, agent_user.id, NotificationType.PROPERTY_ASSIGNED)
    assert len(assigned) == 2

    response = await client.get("/api/properties/my/properties", headers=auth_headers(agent_user))
    assert [item["id"] for item in response.json()["items"]] == [str(prop.id)]


async def test_assign_to_user_without_profile_fails(client, database, admin, agent_user):
    prop = await create_property(database, admin)
    response = await client.patch(
        f"/api/properties/{prop.id}/assign-agent",
        json={"agent_id": str(agent_user.id)},
        headers=auth_headers(admin),
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Agent not found"

    assert (await load(database, Property, prop.id)).assigned_agent_id is None


async def test_deleting_property_clears_agent_membership(client, database, super_admin, agent_user):
    await create_agent_profile(database, agent_user)
    prop = await create_property(database, super_admin)
    headers = auth_headers(super_admin)

    await client.patch(
        f"/api/properties/{prop.id}/assign-agent", json={"agent_id": str(agent_user.id)}, headers=headers
    )
    response = await client.delete(f"/api/properties/{prop.id}", headers=headers)
    assert response.status_code == 200

    agent = await agent_profile(database, agent_user.id)
    assert agent.assigned_property_ids == []


@pytest.mark.parametrize("field", ["price", "name", "type"])
async def test_null_for_required_field_is_rejected(client, database, admin, field):
    prop = await create_property(database, admin)

    response = await client.put(f"/api/properties/{prop.id}", json={field: None}, headers=auth_headers(admin))
    assert response.status_code == 422

    stored = await load(database, Property, prop.id)
    assert stored.name == prop.name
    assert stored.price == prop.price
    assert stored.property_type == prop.property_type

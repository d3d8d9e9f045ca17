"""Tests for registration, logins and account management."""

import pytest

from realty_crm.models.user import User, UserRole

from tests.utils.factories import DEFAULT_PASSWORD, auth_headers, create_user, unique_email
from tests.utils.helpers import load

pytestmark = pytest.mark.integration


async def test_register_then_login(client):
    email = unique_email("buyer")
    response = await client.post(
        "/api/auth/register",
        json={"name": "Tanvir", "email": email, "password": "secret123"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["role"] == "user"

    response = await client.post("/api/auth/login", json={"email": email, "password": "secret123"})
    assert response.status_code == 200
    assert response.json()["user"]["email"] == email


async def test_register_duplicate_email_conflicts(client, end_user):
    response = await client.post(
        "/api/auth/register",
        json={"name": "Copy", "email": end_user.email.upper(), "password": "secret123"},
    )
    assert response.status_code == 409
    assert response.json()["field"] == "email"


async def test_user_login_rejects_staff_accounts(client, agent_user):
    response = await client.post(
        "/api/auth/login", json={"email": agent_user.email, "password": DEFAULT_PASSWORD}
    )
    assert response.status_code == 403


async def test_wrong_password_is_unauthorized(client, end_user):
    response = await client.post("/api/auth/login", json={"email": end_user.email, "password": "nope"})
    assert response.status_code == 401


async def test_admin_login_requires_matching_role(client, agent_user):
    payload = {"email": agent_user.email, "password": DEFAULT_PASSWORD}

    response = await client.post("/api/auth/admin/login", json={**payload, "role": "admin"})
    assert response.status_code == 401

    response = await client.post("/api/auth/admin/login", json={**payload, "role": "agent"})
    assert response.status_code == 200
    assert response.json()["user"]["last_login"] is not None


async def test_admin_login_rejects_deactivated_account(client, database):
    admin = await create_user(database, role=UserRole.ADMIN, is_active=False)
    response = await client.post(
        "/api/auth/admin/login",
        json={"email": admin.email, "password": DEFAULT_PASSWORD, "role": "admin"},
    )
    assert response.status_code == 403


async def test_missing_token_is_unauthorized(client):
    response = await client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


async def test_deactivated_account_token_is_forbidden(client, database):
    user = await create_user(database, role=UserRole.AGENT, is_active=False)
    response = await client.get("/api/auth/me", headers=auth_headers(user))
    assert response.status_code == 403


async def test_change_password(client, end_user):
    headers = auth_headers(end_user)
    response = await client.put(
        "/api/auth/change-password",
        json={"current_password": "wrong", "new_password": "another123"},
        headers=headers,
    )
    assert response.status_code == 401

    response = await client.put(
        "/api/auth/change-password",
        json={"current_password": DEFAULT_PASSWORD, "new_password": "another123"},
        headers=headers,
    )
    assert response.status_code == 200

    response = await client.post(
        "/api/auth/login", json={"email": end_user.email, "password": "another123"}
    )
    assert response.status_code == 200


async def test_super_admin_creates_staff(client, super_admin, admin):
    payload = {
        "name": "New Agent",
        "email": unique_email("agent"),
        "password": "secret123",
        "role": "agent",
    }
    response = await client.post("/api/auth/create-staff", json=payload, headers=auth_headers(admin))
    assert response.status_code == 403

    response = await client.post(
        "/api/auth/create-staff", json=payload, headers=auth_headers(super_admin)
    )
    assert response.status_code == 201
    assert response.json()["role"] == "agent"
    assert response.json()["auth_provider"] == "jwt"

    response = await client.post(
        "/api/auth/admin/login",
        json={"email": payload["email"], "password": "secret123", "role": "agent"},
    )
    assert response.status_code == 200


async def test_super_admin_cannot_delete_or_deactivate_self(client, super_admin):
    headers = auth_headers(super_admin)

    response = await client.delete(f"/api/auth/users/{super_admin.id}", headers=headers)
    assert response.status_code == 400

    response = await client.patch(
        f"/api/auth/users/{super_admin.id}/status", json={"is_active": False}, headers=headers
    )
    assert response.status_code == 400

    response = await client.put(
        f"/api/auth/users/{super_admin.id}", json={"is_active": False}, headers=headers
    )
    assert response.status_code == 400


async def test_super_admin_deactivates_and_deletes_other_accounts(client, database, super_admin):
    target = await create_user(database, role=UserRole.AGENT)
    headers = auth_headers(super_admin)

    response = await client.patch(
        f"/api/auth/users/{target.id}/status", json={"is_active": False}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    response = await client.delete(f"/api/auth/users/{target.id}", headers=headers)
    assert response.status_code == 200
    assert await load(database, User, target.id) is None


async def test_list_users_filters_by_role(client, super_admin, admin, agent_user, end_user):
    response = await client.get(
        "/api/auth/users", params={"role": "agent"}, headers=auth_headers(admin)
    )
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert body["items"][0]["id"] == str(agent_user.id)

    response = await client.get("/api/auth/users", headers=auth_headers(end_user))
    assert response.status_code == 403


async def test_promoting_passwordless_user_requires_password(client, database, super_admin):
    target = await create_user(database, role=UserRole.USER, hashed_password=None)
    headers = auth_headers(super_admin)

    response = await client.put(f"/api/auth/users/{target.id}", json={"role": "agent"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["field"] == "password"
    assert (await load(database, User, target.id)).role == UserRole.USER

    response = await client.put(
        f"/api/auth/users/{target.id}", json={"role": "agent", "password": "fresh-pass"}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["role"] == "agent"


async def test_null_name_or_email_is_rejected(client, database, super_admin, end_user):
    headers = auth_headers(super_admin)
    for field in ("name", "email"):
        response = await client.put(f"/api/auth/users/{end_user.id}", json={field: None}, headers=headers)
        assert response.status_code == 422

    response = await client.put("/api/auth/profile", json={"name": None}, headers=auth_headers(end_user))
    assert response.status_code == 422
    assert (await load(database, User, end_user.id)).name == end_user.name

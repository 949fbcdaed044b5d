"""Authentication and access control tests"""

import pytest
from httpx import AsyncClient

from tableside.models.user import User, UserRole


@pytest.mark.asyncio
async def test_login_returns_tokens(client: AsyncClient, waiter_user):
    response = await client.post(
        "/auth/login",
        data={"username": "waiter@example.com", "password": "testpass123"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["refresh_token"]

    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    assert me.json()["role"] == "waiter"


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, waiter_user):
    response = await client.post(
        "/auth/login",
        data={"username": "waiter@example.com", "password": "wrongpass"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh_rotates_token(client: AsyncClient, waiter_user):
    login = await client.post(
        "/auth/login",
        data={"username": "waiter@example.com", "password": "testpass123"},
    )
    refresh_token = login.json()["refresh_token"]

    response = await client.post("/auth/refresh", json={"refresh_token": refresh_token})
    assert response.status_code == 200
    assert response.json()["refresh_token"]

    # Access tokens are not refresh tokens
    access_token = response.json()["access_token"]
    response = await client.post("/auth/refresh", json={"refresh_token": access_token})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_missing_or_bad_token(client: AsyncClient):
    response = await client.get("/orders")
    assert response.status_code == 401

    response = await client.get("/orders", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_clears_refresh_token(client: AsyncClient, test_db, waiter_user, waiter_headers):
    response = await client.post("/auth/logout", headers=waiter_headers)

    assert response.status_code == 200
    await test_db.refresh(waiter_user)
    assert waiter_user.refresh_token is None


def test_role_checks():
    admin = User(role=UserRole.ADMIN, permissions=[])
    waiter = User(role=UserRole.WAITER, permissions=["view_customers"])
    chef = User(role=UserRole.CHEF, permissions=[])

    assert admin.has_role(UserRole.WAITER)
    assert waiter.has_role(UserRole.WAITER, UserRole.CHEF)
    assert not chef.has_role(UserRole.WAITER)

    assert admin.has_permission("view_customers")
    assert waiter.has_permission("view_customers")
    assert not chef.has_permission("view_customers")


@pytest.mark.asyncio
async def test_chef_cannot_claim(client: AsyncClient, make_order, chef_headers, test_tables, test_menu_items):
    created = await client.post("/orders", json=make_order(test_tables[0], test_menu_items[0]))
    order_id = created.json()["id"]

    response = await client.post(f"/orders/{order_id}/claim", headers=chef_headers)
    assert response.status_code == 403

    response = await client.put(
        f"/orders/{order_id}/status", json={"status": "preparing"}, headers=chef_headers
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_customers_require_permission(client: AsyncClient, test_db, waiter_user, waiter_headers, admin_headers):
    response = await client.get("/customers", headers=waiter_headers)
    assert response.status_code == 403

    response = await client.get("/customers", headers=admin_headers)
    assert response.status_code == 200

    waiter_user.permissions = ["view_customers"]
    await test_db.commit()

    response = await client.get("/customers", headers=waiter_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_admin_only_routes(client: AsyncClient, waiter_headers):
    response = await client.post("/tables", json={"name": "T9"}, headers=waiter_headers)
    assert response.status_code == 403

    response = await client.get("/users", headers=waiter_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_deactivated_user_token_rejected(client: AsyncClient, test_db, waiter_user, waiter_headers):
    waiter_user.is_active = False
    await test_db.commit()

    response = await client.get("/auth/me", headers=waiter_headers)

    assert response.status_code == 401

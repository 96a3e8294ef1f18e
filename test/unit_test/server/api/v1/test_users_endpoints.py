import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_update_me_and_change_password(client: AsyncClient, factory):
    user = await factory.user("viewer")
    headers = factory.headers(user)

    response = await client.patch("/api/v1/users/me", json={"bio": "Hoops fan"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["bio"] == "Hoops fan"

    response = await client.post(
        "/api/v1/users/me/password",
        json={"current_password": "wrong-password", "new_password": "newpassword1"},
        headers=headers,
    )
    assert response.status_code == 400

    response = await client.post(
        "/api/v1/users/me/password",
        json={"current_password": "password123", "new_password": "newpassword1"},
        headers=headers,
    )
    assert response.status_code == 204


async def test_follow_flow(client: AsyncClient, factory):
    fan = await factory.user("viewer")
    star = await factory.user("student")
    headers = factory.headers(fan)

    response = await client.post(f"/api/v1/users/{star.id}/follow", headers=headers)
    assert response.status_code == 200
    assert response.json()["followers_count"] == 1
    again = await client.post(f"/api/v1/users/{star.id}/follow", headers=headers)
    assert again.json()["followers_count"] == 1

    profile = await client.get(f"/api/v1/users/{star.id}", headers=headers)
    assert profile.json()["is_following"] is True

    followers = await client.get(f"/api/v1/users/{star.id}/followers")
    assert [u["id"] for u in followers.json()] == [fan.id]

    response = await client.delete(f"/api/v1/users/{star.id}/follow", headers=headers)
    assert response.json()["followers_count"] == 0


async def test_cannot_follow_self(client: AsyncClient, factory):
    user = await factory.user("viewer")
    response = await client.post(f"/api/v1/users/{user.id}/follow", headers=factory.headers(user))
    assert response.status_code == 400


async def test_unknown_profile(client: AsyncClient):
    response = await client.get("/api/v1/users/missing")
    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


async def test_create_staff_requires_system_admin(client: AsyncClient, factory):
    payload = {"email": "scout@example.com", "password": "password123", "name": "Scout", "role": "xen_scout"}
    coach = await factory.user("coach")
    response = await client.post("/api/v1/users/staff", json=payload, headers=factory.headers(coach))
    assert response.status_code == 403

    admin = await factory.user("system_admin")
    response = await client.post("/api/v1/users/staff", json=payload, headers=factory.headers(admin))
    assert response.status_code == 201
    assert response.json()["role"] == "xen_scout"

    response = await client.post(
        "/api/v1/users/staff", json={**payload, "email": "s2@example.com", "role": "student"}, headers=factory.headers(admin)
    )
    assert response.status_code == 400


async def test_frozen_token_rejected(client: AsyncClient, factory):
    admin = await factory.user("system_admin")
    user = await factory.user("viewer")
    headers = factory.headers(user)

    response = await client.patch(
        f"/api/v1/users/{user.id}/frozen", json={"is_frozen": True}, headers=factory.headers(admin)
    )
    assert response.status_code == 200
    assert response.json()["is_frozen"] is True

    response = await client.get("/api/v1/users/me", headers=headers)
    assert response.status_code == 403

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_create_school_and_admin(client: AsyncClient, factory):
    admin = await factory.user("system_admin")
    headers = factory.headers(admin)

    response = await client.post(
        "/api/v1/schools", json={"name": "North High", "payment_amount": "250.00"}, headers=headers
    )
    assert response.status_code == 201
    school = response.json()
    assert school["max_students"] == 100
    assert school["is_active"] is True

    response = await client.post(
        f"/api/v1/schools/{school['id']}/admins",
        json={"email": "head@north.edu", "name": "Head", "password": "password123"},
        headers=headers,
    )
    assert response.status_code == 201
    assert response.json()["role"] == "school_admin"

    admins = await client.get(f"/api/v1/schools/{school['id']}/admins", headers=headers)
    assert [a["email"] for a in admins.json()] == ["head@north.edu"]


async def test_create_school_requires_system_admin(client: AsyncClient, factory):
    finance = await factory.user("finance")
    response = await client.post("/api/v1/schools", json={"name": "X"}, headers=factory.headers(finance))
    assert response.status_code == 403


async def test_disable_blocks_enrollment(client: AsyncClient, factory):
    admin = await factory.user("system_admin")
    school = await factory.school()
    school_admin = await factory.user("school_admin", school_id=school.id)

    response = await client.post(f"/api/v1/schools/{school.id}/disable", headers=factory.headers(admin))
    assert response.json()["is_active"] is False

    response = await client.post(
        "/api/v1/school-admin/students",
        json={"email": "p@example.com", "password": "password123", "name": "P"},
        headers=factory.headers(school_admin),
    )
    assert response.status_code == 403


async def test_subscription_endpoints(client: AsyncClient, factory):
    finance = await factory.user("finance")
    school = await factory.school(max_students=10)
    headers = factory.headers(finance)
    admin_headers = factory.headers(await factory.user("system_admin"))

    response = await client.post(
        f"/api/v1/schools/{school.id}/renew", json={"amount": "120.00", "frequency": "monthly"}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["subscription_expires_at"] is not None

    response = await client.post(
        f"/api/v1/schools/{school.id}/student-limit", json={"new_limit": 25, "amount": "50"}, headers=admin_headers
    )
    assert response.json()["max_students"] == 25

    response = await client.post(
        f"/api/v1/schools/{school.id}/renew", json={"amount": "0", "frequency": "monthly"}, headers=headers
    )
    assert response.status_code == 400

    records = await client.get(f"/api/v1/schools/{school.id}/payments", headers=headers)
    assert {r["payment_type"] for r in records.json()} == {"student_limit_increase", "initial"}


async def test_student_limit_below_enrollment(client: AsyncClient, factory):
    admin = await factory.user("system_admin")
    school = await factory.school(max_students=5)
    for _ in range(3):
        await factory.student(school)

    response = await client.post(
        f"/api/v1/schools/{school.id}/student-limit", json={"new_limit": 2}, headers=factory.headers(admin)
    )
    assert response.status_code == 400


async def test_expiring_is_finance_only(client: AsyncClient, factory):
    coach = await factory.user("coach")
    response = await client.get("/api/v1/schools/expiring", headers=factory.headers(coach))
    assert response.status_code == 403

    finance = await factory.user("finance")
    response = await client.post("/api/v1/schools/expiring/notify", headers=factory.headers(finance))
    assert response.json() == {"schools": 0, "notifications": 0}


async def test_school_admin_sees_only_own_school(client: AsyncClient, factory):
    school = await factory.school()
    other = await factory.school()
    admin = await factory.user("school_admin", school_id=school.id)

    assert (await client.get(f"/api/v1/schools/{school.id}", headers=factory.headers(admin))).status_code == 200
    assert (await client.get(f"/api/v1/schools/{other.id}", headers=factory.headers(admin))).status_code == 403

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/system-settings"


async def test_upsert_get_list_delete(client: AsyncClient, factory):
    admin = await factory.user("system_admin")
    headers = factory.headers(admin)

    response = await client.put(
        f"{BASE}/xen_watch_price_cents", json={"value": "1500", "category": "payments"}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["value"] == "1500"
    assert response.json()["updated_by"] == admin.id

    response = await client.put(f"{BASE}/xen_watch_price_cents", json={"value": "1750", "category": "payments"}, headers=headers)
    assert response.json()["value"] == "1750"

    assert (await client.get(f"{BASE}/xen_watch_price_cents", headers=headers)).json()["value"] == "1750"
    listed = await client.get(BASE, params={"category": "payments"}, headers=headers)
    assert [s["key"] for s in listed.json()] == ["xen_watch_price_cents"]

    assert (await client.delete(f"{BASE}/xen_watch_price_cents", headers=headers)).status_code == 204
    assert (await client.get(f"{BASE}/xen_watch_price_cents", headers=headers)).status_code == 404


async def test_price_must_be_whole_number(client: AsyncClient, factory):
    admin = await factory.user("system_admin")
    response = await client.put(
        f"{BASE}/xen_watch_price_cents", json={"value": "12.50"}, headers=factory.headers(admin)
    )
    assert response.status_code == 400


async def test_settings_admin_only(client: AsyncClient, factory):
    finance = await factory.user("finance")
    response = await client.get(BASE, headers=factory.headers(finance))
    assert response.status_code == 403

"""Create routes — POST /create and POST /add-bulk.

Invariants:
    - Invalid payloads are rejected with 422 VALIDATION_ERROR before any insert
    - added_by is always the authenticated admin
    - Bulk insert rejects an absent/empty/non-list "data" with 400 BAD_REQUEST
"""

from uuid import UUID

from sqlalchemy import func, select

from metal_api.models.metal import Metal
from metal_api.services import db_service

URL = "/api/v1/admin/metals"
ADMIN_ID = "00000000-0000-0000-0000-0000000000a1"


async def _metal_count(test_session_factory) -> int:
    async with test_session_factory() as session:
        result = await session.execute(select(func.count()).select_from(Metal))
        return result.scalar_one()


# --- POST /create -------------------------------------------------------------

async def test_create_returns_created_document(client):
    res = await client.post(f"{URL}/create", json={
        "name": "Gold", "symbol": "Au", "purity": 99.9,
    })
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "SUCCESS"
    assert body["message"] == "Your request is successfully executed"
    data = body["data"]
    assert data["name"] == "Gold"
    assert data["unit"] == "gram"
    assert data["is_deleted"] is False
    assert UUID(data["id"])


async def test_create_sets_added_by_from_authenticated_user(client, load_metal):
    res = await client.post(f"{URL}/create", json={"name": "Gold"})
    assert res.json()["data"]["added_by"] == ADMIN_ID
    metal = await load_metal(UUID(res.json()["data"]["id"]))
    assert str(metal.added_by) == ADMIN_ID


async def test_create_rejects_client_supplied_added_by(client):
    res = await client.post(f"{URL}/create", json={
        "name": "Gold", "added_by": "00000000-0000-0000-0000-000000000999",
    })
    assert res.status_code == 422
    assert res.json()["status"] == "VALIDATION_ERROR"


async def test_create_invalid_payload_rejected_before_insert(client, monkeypatch):
    calls = []

    async def fake_create(*args, **kwargs):
        calls.append(args)

    monkeypatch.setattr(db_service, "create", fake_create)
    res = await client.post(f"{URL}/create", json={"purity": 150})

    assert res.status_code == 422
    body = res.json()
    assert body["status"] == "VALIDATION_ERROR"
    assert body["message"].startswith("Invalid values in parameters, ")
    assert "name" in body["message"]
    assert "purity" in body["message"]
    assert calls == []


async def test_create_without_body_is_validation_error(client):
    res = await client.post(f"{URL}/create")
    assert res.status_code == 422
    assert res.json()["status"] == "VALIDATION_ERROR"


async def test_create_duplicate_name_is_internal_error(client):
    await client.post(f"{URL}/create", json={"name": "Gold"})
    res = await client.post(f"{URL}/create", json={"name": "Gold"})
    assert res.status_code == 500
    body = res.json()
    assert body["status"] == "FAILURE"
    assert body["message"].startswith("Database insert failed")


# --- POST /add-bulk -----------------------------------------------------------

async def test_bulk_insert_returns_count(client, test_session_factory):
    res = await client.post(f"{URL}/add-bulk", json={"data": [
        {"name": "Gold"}, {"name": "Silver"}, {"name": "Copper", "purity": 99.0},
    ]})
    assert res.status_code == 200
    assert res.json()["data"] == {"count": 3}
    assert await _metal_count(test_session_factory) == 3


async def test_bulk_insert_sets_added_by_on_every_row(client, test_session_factory):
    await client.post(f"{URL}/add-bulk", json={"data": [{"name": "Gold"}, {"name": "Tin"}]})
    async with test_session_factory() as session:
        result = await session.execute(select(Metal.added_by))
        assert {str(v) for v in result.scalars()} == {ADMIN_ID}


async def test_bulk_insert_rejects_empty_array(client):
    res = await client.post(f"{URL}/add-bulk", json={"data": []})
    assert res.status_code == 400
    assert res.json()["status"] == "BAD_REQUEST"


async def test_bulk_insert_rejects_missing_data(client):
    res = await client.post(f"{URL}/add-bulk", json={})
    assert res.status_code == 400


async def test_bulk_insert_rejects_non_list_data(client):
    res = await client.post(f"{URL}/add-bulk", json={"data": {"name": "Gold"}})
    assert res.status_code == 400


async def test_bulk_insert_invalid_item_inserts_nothing(client, test_session_factory):
    res = await client.post(f"{URL}/add-bulk", json={"data": [
        {"name": "Gold"}, {"name": ""},
    ]})
    assert res.status_code == 422
    assert res.json()["status"] == "VALIDATION_ERROR"
    assert await _metal_count(test_session_factory) == 0

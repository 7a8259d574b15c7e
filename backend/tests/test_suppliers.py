"""Integration tests for /api/suppliers, including the error contract end to end."""

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.models import Supplier


async def _supplier_id(db: AsyncSession, name: str) -> int:
    return (await db.execute(select(Supplier.id).where(Supplier.name == name))).scalar_one()


# ---------------------------------------------------------------------------
# 1. Happy paths
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_create_supplier(client: AsyncClient, user_headers: dict[str, str]) -> None:
    resp = await client.post(
        "/api/suppliers",
        json={"name": "  Umbrella  ", "email": "buy@umbrella.example"},
        headers=user_headers,
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["name"] == "Umbrella"
    assert body["created_by"] == "alice"
    assert body["version"] == 1


@pytest.mark.asyncio
async def test_list_suppliers_paginated(
    client: AsyncClient, seeded_db: AsyncSession, user_headers: dict[str, str]
) -> None:
    resp = await client.get("/api/suppliers", params={"limit": 2}, headers=user_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 3
    assert body["limit"] == 2
    assert len(body["items"]) == 2


@pytest.mark.asyncio
async def test_list_suppliers_filters_by_name(
    client: AsyncClient, seeded_db: AsyncSession, user_headers: dict[str, str]
) -> None:
    resp = await client.get("/api/suppliers", params={"name": "glob"}, headers=user_headers)
    body = resp.json()
    assert body["total"] == 1
    assert body["items"][0]["name"] == "Globex"


@pytest.mark.asyncio
async def test_update_supplier_bumps_version(
    client: AsyncClient, seeded_db: AsyncSession, user_headers: dict[str, str]
) -> None:
    supplier_id = await _supplier_id(seeded_db, "Globex")
    resp = await client.put(
        f"/api/suppliers/{supplier_id}",
        json={"name": "Globex Corporation", "version": 1},
        headers=user_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Globex Corporation"
    assert resp.json()["version"] == 2


@pytest.mark.asyncio
async def test_admin_deletes_supplier_without_items(
    client: AsyncClient, seeded_db: AsyncSession, admin_headers: dict[str, str]
) -> None:
    supplier_id = await _supplier_id(seeded_db, "Initech")
    resp = await client.delete(f"/api/suppliers/{supplier_id}", headers=admin_headers)
    assert resp.status_code == 204

    resp = await client.get(f"/api/suppliers/{supplier_id}", headers=admin_headers)
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# 2. Error contract
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_empty_name_is_rejected(client: AsyncClient, user_headers: dict[str, str]) -> None:
    resp = await client.post("/api/suppliers", json={"name": ""}, headers=user_headers)
    assert resp.status_code == 400
    body = resp.json()
    assert "name" in body["message"]
    assert body["status"] == "BAD_REQUEST"
    assert body["path"] == "/api/suppliers"


@pytest.mark.asyncio
async def test_blank_name_is_rejected_by_service(
    client: AsyncClient, user_headers: dict[str, str]
) -> None:
    resp = await client.post("/api/suppliers", json={"name": "   "}, headers=user_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Validation failed: 1 field error(s)"


@pytest.mark.asyncio
async def test_duplicate_name_conflicts(
    client: AsyncClient, seeded_db: AsyncSession, user_headers: dict[str, str]
) -> None:
    resp = await client.post("/api/suppliers", json={"name": "ACME Corp"}, headers=user_headers)
    assert resp.status_code == 409
    assert resp.json()["message"] == "Supplier with name 'ACME Corp' already exists"


@pytest.mark.asyncio
async def test_missing_token_requires_authentication(
    client: AsyncClient, seeded_db: AsyncSession
) -> None:
    resp = await client.get("/api/suppliers")
    assert resp.status_code == 401
    assert resp.json()["message"] == "Authentication required"


@pytest.mark.asyncio
async def test_unknown_token_gets_the_same_401(client: AsyncClient) -> None:
    resp = await client.get("/api/suppliers", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Authentication required"


@pytest.mark.asyncio
async def test_user_cannot_delete_supplier(
    client: AsyncClient, seeded_db: AsyncSession, user_headers: dict[str, str]
) -> None:
    supplier_id = await _supplier_id(seeded_db, "Initech")
    resp = await client.delete(f"/api/suppliers/{supplier_id}", headers=user_headers)
    assert resp.status_code == 403
    assert resp.json()["message"] == "Access denied"


@pytest.mark.asyncio
async def test_stale_version_is_a_concurrent_update(
    client: AsyncClient, seeded_db: AsyncSession, user_headers: dict[str, str]
) -> None:
    supplier_id = await _supplier_id(seeded_db, "Globex")

    first = await client.put(
        f"/api/suppliers/{supplier_id}",
        json={"name": "Globex East", "version": 1},
        headers=user_headers,
    )
    assert first.status_code == 200

    # Second writer still holds version 1
    second = await client.put(
        f"/api/suppliers/{supplier_id}",
        json={"name": "Globex West", "version": 1},
        headers=user_headers,
    )
    assert second.status_code == 409
    assert second.json()["message"] == "Concurrent update detected"

    current = await client.get(f"/api/suppliers/{supplier_id}", headers=user_headers)
    assert current.json()["name"] == "Globex East"


@pytest.mark.asyncio
async def test_cannot_delete_supplier_with_items(
    client: AsyncClient, seeded_db: AsyncSession, admin_headers: dict[str, str]
) -> None:
    supplier_id = await _supplier_id(seeded_db, "ACME Corp")
    resp = await client.delete(f"/api/suppliers/{supplier_id}", headers=admin_headers)
    assert resp.status_code == 409
    assert resp.json()["message"] == "Cannot delete supplier with linked items"


@pytest.mark.asyncio
async def test_unknown_supplier_is_not_found(
    client: AsyncClient, user_headers: dict[str, str]
) -> None:
    resp = await client.get("/api/suppliers/9999", headers=user_headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Supplier with id 9999 not found"


@pytest.mark.asyncio
async def test_invalid_limit_is_bad_request(client: AsyncClient, user_headers: dict[str, str]) -> None:
    resp = await client.get("/api/suppliers", params={"limit": 0}, headers=user_headers)
    assert resp.status_code == 400
    assert resp.json()["message"].startswith("limit ")


@pytest.mark.asyncio
async def test_responses_carry_request_id(client: AsyncClient) -> None:
    resp = await client.get("/api/suppliers", headers={"X-Request-ID": "trace-1"})
    assert resp.headers["x-request-id"] == "trace-1"

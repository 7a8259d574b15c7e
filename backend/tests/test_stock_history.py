"""Integration tests for /api/stock-history."""

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.models import InventoryItem, Supplier

HISTORY = "/api/stock-history"


async def _item_id(db: AsyncSession, sku: str) -> int:
    return (await db.execute(select(InventoryItem.id).where(InventoryItem.sku == sku))).scalar_one()


async def _make_changes(client: AsyncClient, item_id: int, headers: dict[str, str]) -> None:
    for delta, reason in [(-2, "SOLD"), (5, "RETURNED_BY_CUSTOMER"), (-1, "DAMAGED")]:
        resp = await client.patch(
            f"/api/inventory/items/{item_id}/quantity",
            json={"delta": delta, "reason": reason},
            headers=headers,
        )
        assert resp.status_code == 200


@pytest.mark.asyncio
async def test_history_is_newest_first(
    client: AsyncClient, seeded_db: AsyncSession, user_headers: dict[str, str]
) -> None:
    item_id = await _item_id(seeded_db, "RS-001")
    await _make_changes(client, item_id, user_headers)

    resp = await client.get(HISTORY, headers=user_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 3
    assert [row["reason"] for row in body["items"]] == ["DAMAGED", "RETURNED_BY_CUSTOMER", "SOLD"]
    assert body["items"][0]["item_name"] == "Rocket Skates"


@pytest.mark.asyncio
async def test_history_filters_by_reason(
    client: AsyncClient, seeded_db: AsyncSession, user_headers: dict[str, str]
) -> None:
    item_id = await _item_id(seeded_db, "RS-001")
    await _make_changes(client, item_id, user_headers)

    resp = await client.get(HISTORY, params={"reason": "SOLD"}, headers=user_headers)
    body = resp.json()
    assert body["total"] == 1
    assert body["items"][0]["change"] == -2


@pytest.mark.asyncio
async def test_history_for_one_item(
    client: AsyncClient, seeded_db: AsyncSession, user_headers: dict[str, str]
) -> None:
    skates = await _item_id(seeded_db, "RS-001")
    magnet = await _item_id(seeded_db, "GM-002")
    await _make_changes(client, skates, user_headers)
    await client.patch(
        f"/api/inventory/items/{magnet}/quantity", json={"delta": 1}, headers=user_headers
    )

    resp = await client.get(f"{HISTORY}/item/{magnet}", headers=user_headers)
    body = resp.json()
    assert body["total"] == 1
    assert body["items"][0]["reason"] == "MANUAL_UPDATE"


@pytest.mark.asyncio
async def test_history_unknown_reason(client: AsyncClient, user_headers: dict[str, str]) -> None:
    resp = await client.get(HISTORY, params={"reason": "BOGUS"}, headers=user_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid value for: reason"


@pytest.mark.asyncio
async def test_history_requires_authentication(client: AsyncClient) -> None:
    resp = await client.get(HISTORY)
    assert resp.status_code == 401
    assert resp.json()["message"] == "Authentication required"


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------
SEARCH = f"{HISTORY}/search"


async def _supplier_id(db: AsyncSession, name: str) -> int:
    return (await db.execute(select(Supplier.id).where(Supplier.name == name))).scalar_one()


async def _sell_device(client: AsyncClient, db: AsyncSession, headers: dict[str, str]) -> int:
    device = await _item_id(db, "DD-100")
    resp = await client.patch(
        f"/api/inventory/items/{device}/quantity",
        json={"delta": -1, "reason": "SOLD"},
        headers=headers,
    )
    assert resp.status_code == 200
    return device


@pytest.mark.asyncio
async def test_search_within_date_range(
    client: AsyncClient, seeded_db: AsyncSession, user_headers: dict[str, str]
) -> None:
    await _make_changes(client, await _item_id(seeded_db, "RS-001"), user_headers)
    await _sell_device(client, seeded_db, user_headers)

    resp = await client.get(
        SEARCH,
        params={"startDate": "2000-01-01T00:00:00Z", "endDate": "2999-12-31T23:59:59"},
        headers=user_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 4
    assert body["limit"] == 50

    resp = await client.get(SEARCH, params={"startDate": "2999-01-01T00:00:00"}, headers=user_headers)
    assert resp.json()["total"] == 0


@pytest.mark.asyncio
async def test_search_rejects_inverted_date_range(
    client: AsyncClient, user_headers: dict[str, str]
) -> None:
    resp = await client.get(
        SEARCH,
        params={"startDate": "2026-02-01T00:00:00", "endDate": "2026-01-01T00:00:00"},
        headers=user_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "endDate must be >= startDate"


@pytest.mark.asyncio
async def test_search_rejects_unparseable_date(
    client: AsyncClient, user_headers: dict[str, str]
) -> None:
    resp = await client.get(SEARCH, params={"startDate": "yesterday"}, headers=user_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid value for: startDate"


@pytest.mark.asyncio
async def test_search_by_partial_item_name(
    client: AsyncClient, seeded_db: AsyncSession, user_headers: dict[str, str]
) -> None:
    await _make_changes(client, await _item_id(seeded_db, "RS-001"), user_headers)
    await _sell_device(client, seeded_db, user_headers)

    resp = await client.get(SEARCH, params={"itemName": "SKATES"}, headers=user_headers)
    body = resp.json()
    assert body["total"] == 3
    assert {row["item_name"] for row in body["items"]} == {"Rocket Skates"}


@pytest.mark.asyncio
async def test_search_by_supplier_keeps_rows_of_deleted_items(
    client: AsyncClient,
    seeded_db: AsyncSession,
    user_headers: dict[str, str],
    admin_headers: dict[str, str],
) -> None:
    globex = await _supplier_id(seeded_db, "Globex")
    await _make_changes(client, await _item_id(seeded_db, "RS-001"), user_headers)
    device = await _sell_device(client, seeded_db, user_headers)
    resp = await client.delete(
        f"/api/inventory/items/{device}", params={"reason": "SCRAPPED"}, headers=admin_headers
    )
    assert resp.status_code == 204

    resp = await client.get(SEARCH, params={"supplierId": globex}, headers=user_headers)
    body = resp.json()
    assert body["total"] == 2
    assert [row["reason"] for row in body["items"]] == ["SCRAPPED", "SOLD"]
    assert {row["supplier_id"] for row in body["items"]} == {globex}


@pytest.mark.asyncio
async def test_search_caps_page_size(
    client: AsyncClient, seeded_db: AsyncSession, user_headers: dict[str, str]
) -> None:
    resp = await client.get(SEARCH, params={"limit": 500}, headers=user_headers)
    assert resp.status_code == 200
    assert resp.json()["limit"] == 200

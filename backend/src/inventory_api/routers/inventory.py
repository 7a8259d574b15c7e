"""Inventory item endpoints."""

from fastapi import APIRouter, Query, Request, Response

from inventory_api.dependencies import DB, AdminUser, CurrentUser, Limit, Skip
from inventory_api.models import StockChangeReason
from inventory_api.schemas.inventory import (
    InventoryItemCreate,
    InventoryItemListResponse,
    InventoryItemResponse,
    InventoryItemUpdate,
    PriceUpdate,
    QuantityAdjustment,
)
from inventory_api.security import ROLE_ADMIN, has_role
from inventory_api.services import inventory as service

router = APIRouter(prefix="/api/inventory/items", tags=["inventory"])


@router.get("", response_model=InventoryItemListResponse)
async def list_items(
    db: DB,
    user: CurrentUser,
    skip: Skip = 0,
    limit: Limit = 20,
    supplier_id: int | None = None,
) -> InventoryItemListResponse:
    result = await service.get_items(db, skip, limit, supplier_id)
    return InventoryItemListResponse.model_validate(result)


@router.get("/search", response_model=InventoryItemListResponse)
async def search_items(
    name: str, db: DB, user: CurrentUser, skip: Skip = 0, limit: Limit = 10
) -> InventoryItemListResponse:
    """Items whose name contains ``name`` (any case), sorted by price ascending."""
    result = await service.search_items(db, name, skip, limit)
    return InventoryItemListResponse.model_validate(result)


@router.get("/{item_id}", response_model=InventoryItemResponse)
async def get_item(item_id: int, db: DB, user: CurrentUser) -> InventoryItemResponse:
    item = await service.get_item(db, item_id)
    return InventoryItemResponse.model_validate(item)


@router.post("", response_model=InventoryItemResponse, status_code=201)
async def create_item(
    payload: InventoryItemCreate, db: DB, user: CurrentUser
) -> InventoryItemResponse:
    """Create an item; its initial quantity is recorded as INITIAL_STOCK history."""
    item = await service.create_item(db, payload, user.username)
    return InventoryItemResponse.model_validate(item)


@router.put("/{item_id}", response_model=InventoryItemResponse)
async def update_item(
    item_id: int, payload: InventoryItemUpdate, request: Request, db: DB, user: CurrentUser
) -> InventoryItemResponse:
    item = await service.update_item(
        db, item_id, payload, user.username, is_admin=has_role(request, ROLE_ADMIN)
    )
    return InventoryItemResponse.model_validate(item)


@router.patch("/{item_id}/quantity", response_model=InventoryItemResponse)
async def adjust_quantity(
    item_id: int, payload: QuantityAdjustment, db: DB, user: CurrentUser
) -> InventoryItemResponse:
    item = await service.adjust_quantity(db, item_id, payload, user.username)
    return InventoryItemResponse.model_validate(item)


@router.patch("/{item_id}/price", response_model=InventoryItemResponse)
async def update_price(
    item_id: int, payload: PriceUpdate, db: DB, user: CurrentUser
) -> InventoryItemResponse:
    item = await service.update_price(db, item_id, payload, user.username)
    return InventoryItemResponse.model_validate(item)


@router.delete("/{item_id}", status_code=204)
async def delete_item(
    item_id: int,
    db: DB,
    admin: AdminUser,
    reason: StockChangeReason = Query(...),
) -> Response:
    """Delete an item with zero stock, recording ``reason`` (e.g. SCRAPPED) in the history."""
    await service.delete_item(db, item_id, reason, admin.username)
    return Response(status_code=204)

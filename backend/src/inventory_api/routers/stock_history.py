"""Stock history endpoints (read-only)."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Query

from inventory_api.dependencies import DB, CurrentUser, Limit, Skip
from inventory_api.models import StockChangeReason
from inventory_api.schemas.stock_history import StockHistoryListResponse
from inventory_api.services import stock_history as service

router = APIRouter(prefix="/api/stock-history", tags=["stock-history"])

# Larger pages than the listing endpoints allow; bigger requests are capped, not rejected
SEARCH_MAX_PAGE_SIZE = 200


@router.get("", response_model=StockHistoryListResponse)
async def list_history(
    db: DB,
    user: CurrentUser,
    skip: Skip = 0,
    limit: Limit = 20,
    item_id: int | None = None,
    reason: StockChangeReason | None = None,
) -> StockHistoryListResponse:
    """Newest-first audit rows, filterable by item and reason."""
    result = await service.get_history(db, skip, limit, item_id, reason)
    return StockHistoryListResponse.model_validate(result)


@router.get("/search", response_model=StockHistoryListResponse)
async def search_history(
    db: DB,
    user: CurrentUser,
    start_date: Annotated[datetime | None, Query(alias="startDate")] = None,
    end_date: Annotated[datetime | None, Query(alias="endDate")] = None,
    item_name: Annotated[str | None, Query(alias="itemName")] = None,
    supplier_id: Annotated[int | None, Query(alias="supplierId")] = None,
    skip: Skip = 0,
    limit: Annotated[int, Query(ge=1)] = 50,
) -> StockHistoryListResponse:
    """Newest-first rows in an inclusive ISO-8601 time window.

    Every filter is optional; ``endDate`` earlier than ``startDate`` is a 400.
    """
    result = await service.search_history(
        db,
        skip,
        min(limit, SEARCH_MAX_PAGE_SIZE),
        start_date,
        end_date,
        item_name,
        supplier_id,
    )
    return StockHistoryListResponse.model_validate(result)


@router.get("/item/{item_id}", response_model=StockHistoryListResponse)
async def list_item_history(
    item_id: int, db: DB, user: CurrentUser, skip: Skip = 0, limit: Limit = 20
) -> StockHistoryListResponse:
    result = await service.get_history(db, skip, limit, item_id)
    return StockHistoryListResponse.model_validate(result)

"""Stock history: the audit trail written by every quantity or price change."""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.exceptions import InvalidRequestError
from inventory_api.models import InventoryItem, StockChangeReason, StockHistory
from inventory_api.repositories import stock_history as repo
from inventory_api.schemas.pagination import Paginated


def record_change(
    db: AsyncSession,
    item: InventoryItem,
    change: int,
    reason: StockChangeReason,
    username: str,
    price: Decimal | None = None,
) -> StockHistory:
    """Append one audit row for ``item``. Flushing is left to the caller."""
    entry = StockHistory(
        item_id=item.id,
        item_name=item.name,
        supplier_id=item.supplier_id,
        change=change,
        reason=reason.value,
        price_at_change=price if price is not None else item.price,
        created_by=username,
    )
    db.add(entry)
    return entry


async def get_history(
    db: AsyncSession,
    skip: int,
    limit: int,
    item_id: int | None = None,
    reason: StockChangeReason | None = None,
) -> Paginated[StockHistory]:
    reason_value = reason.value if reason is not None else None
    items = await repo.list_history(db, skip, limit, item_id, reason_value)
    total = await repo.count_history(db, item_id, reason_value)
    return Paginated(items=items, total=total, skip=skip, limit=limit)


def _as_utc(value: datetime | None) -> datetime | None:
    """Naive timestamps are read as UTC, the zone history rows are written in."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


async def search_history(
    db: AsyncSession,
    skip: int,
    limit: int,
    start: datetime | None = None,
    end: datetime | None = None,
    item_name: str | None = None,
    supplier_id: int | None = None,
) -> Paginated[StockHistory]:
    """History rows between ``start`` and ``end`` (both inclusive, either optional).

    ``item_name`` matches any part of the name the item had when the row was
    written, so rows of renamed or deleted items stay searchable.
    """
    start, end = _as_utc(start), _as_utc(end)
    if start is not None and end is not None and end < start:
        raise InvalidRequestError("endDate must be >= startDate")
    item_name = item_name.strip() if item_name else None
    items = await repo.search_history(db, skip, limit, start, end, item_name, supplier_id)
    total = await repo.count_search(db, start, end, item_name, supplier_id)
    return Paginated(items=items, total=total, skip=skip, limit=limit)

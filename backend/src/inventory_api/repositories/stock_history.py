"""Stock history data-access layer."""

from datetime import datetime
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.models import StockHistory


def _filtered(stmt: Select[Any], item_id: int | None, reason: str | None) -> Select[Any]:
    if item_id is not None:
        stmt = stmt.where(StockHistory.item_id == item_id)
    if reason is not None:
        stmt = stmt.where(StockHistory.reason == reason)
    return stmt


async def list_history(
    db: AsyncSession,
    skip: int,
    limit: int,
    item_id: int | None = None,
    reason: str | None = None,
) -> list[StockHistory]:
    """Return a page of history rows, newest first."""
    stmt = _filtered(select(StockHistory), item_id, reason)
    stmt = stmt.order_by(StockHistory.id.desc()).offset(skip).limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def count_history(
    db: AsyncSession, item_id: int | None = None, reason: str | None = None
) -> int:
    stmt = _filtered(select(func.count(StockHistory.id)), item_id, reason)
    result = await db.execute(stmt)
    return result.scalar_one()


def _searched(
    stmt: Select[Any],
    start: datetime | None,
    end: datetime | None,
    item_name: str | None,
    supplier_id: int | None,
) -> Select[Any]:
    if start is not None:
        stmt = stmt.where(StockHistory.created_at >= start)
    if end is not None:
        stmt = stmt.where(StockHistory.created_at <= end)
    if item_name:
        stmt = stmt.where(
            func.lower(StockHistory.item_name).contains(item_name.lower(), autoescape=True)
        )
    if supplier_id is not None:
        stmt = stmt.where(StockHistory.supplier_id == supplier_id)
    return stmt


async def search_history(
    db: AsyncSession,
    skip: int,
    limit: int,
    start: datetime | None = None,
    end: datetime | None = None,
    item_name: str | None = None,
    supplier_id: int | None = None,
) -> list[StockHistory]:
    """Rows inside an inclusive time window, newest first."""
    stmt = _searched(select(StockHistory), start, end, item_name, supplier_id)
    stmt = stmt.order_by(StockHistory.created_at.desc(), StockHistory.id.desc())
    result = await db.execute(stmt.offset(skip).limit(limit))
    return list(result.scalars().all())


async def count_search(
    db: AsyncSession,
    start: datetime | None = None,
    end: datetime | None = None,
    item_name: str | None = None,
    supplier_id: int | None = None,
) -> int:
    stmt = _searched(select(func.count(StockHistory.id)), start, end, item_name, supplier_id)
    result = await db.execute(stmt)
    return result.scalar_one()

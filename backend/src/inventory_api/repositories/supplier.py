"""Supplier data-access layer.

Pure query functions with no business logic and no HTTP concerns.
Each function takes a session and returns models or scalars.
"""

from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.models import InventoryItem, Supplier


def _matching_name(stmt: Select[Any], name: str | None) -> Select[Any]:
    """Case-insensitive substring filter; no-op for an empty search."""
    if not name:
        return stmt
    return stmt.where(func.lower(Supplier.name).contains(name.lower()))


async def list_suppliers(
    db: AsyncSession, skip: int, limit: int, name: str | None = None
) -> list[Supplier]:
    """Return a page of suppliers ordered by id."""
    stmt = _matching_name(select(Supplier), name).order_by(Supplier.id).offset(skip).limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def count_suppliers(db: AsyncSession, name: str | None = None) -> int:
    stmt = _matching_name(select(func.count(Supplier.id)), name)
    result = await db.execute(stmt)
    return result.scalar_one()


async def get_supplier(db: AsyncSession, supplier_id: int) -> Supplier | None:
    return await db.get(Supplier, supplier_id)


async def find_by_name_ignore_case(db: AsyncSession, name: str) -> Supplier | None:
    stmt = select(Supplier).where(func.lower(Supplier.name) == name.lower())
    result = await db.execute(stmt)
    return result.scalars().first()


async def has_linked_items(db: AsyncSession, supplier_id: int) -> bool:
    stmt = select(func.count(InventoryItem.id)).where(InventoryItem.supplier_id == supplier_id)
    result = await db.execute(stmt)
    return result.scalar_one() > 0

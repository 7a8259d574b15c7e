"""Inventory item data-access layer."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.models import InventoryItem


async def list_items(
    db: AsyncSession, skip: int, limit: int, supplier_id: int | None = None
) -> list[InventoryItem]:
    """Return a page of items ordered by id, optionally for one supplier."""
    stmt = select(InventoryItem).order_by(InventoryItem.id).offset(skip).limit(limit)
    if supplier_id is not None:
        stmt = stmt.where(InventoryItem.supplier_id == supplier_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def count_items(db: AsyncSession, supplier_id: int | None = None) -> int:
    stmt = select(func.count(InventoryItem.id))
    if supplier_id is not None:
        stmt = stmt.where(InventoryItem.supplier_id == supplier_id)
    result = await db.execute(stmt)
    return result.scalar_one()


async def get_item(db: AsyncSession, item_id: int) -> InventoryItem | None:
    return await db.get(InventoryItem, item_id)


async def find_by_sku(db: AsyncSession, sku: str) -> InventoryItem | None:
    stmt = select(InventoryItem).where(InventoryItem.sku == sku)
    result = await db.execute(stmt)
    return result.scalars().first()


async def find_by_supplier_and_name(
    db: AsyncSession, supplier_id: int, name: str
) -> InventoryItem | None:
    """Case-insensitive name lookup within one supplier's catalogue."""
    stmt = select(InventoryItem).where(
        InventoryItem.supplier_id == supplier_id,
        func.lower(InventoryItem.name) == name.lower(),
    )
    result = await db.execute(stmt)
    return result.scalars().first()


async def search_by_name(
    db: AsyncSession, name: str, skip: int, limit: int
) -> list[InventoryItem]:
    """Items whose name contains ``name`` (any case), cheapest first."""
    stmt = (
        select(InventoryItem)
        .where(func.lower(InventoryItem.name).contains(name.lower(), autoescape=True))
        .order_by(InventoryItem.price, InventoryItem.id)
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def count_by_name(db: AsyncSession, name: str) -> int:
    stmt = select(func.count(InventoryItem.id)).where(
        func.lower(InventoryItem.name).contains(name.lower(), autoescape=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one()

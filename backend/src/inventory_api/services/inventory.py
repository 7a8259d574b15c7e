"""Inventory item business logic.

Field rules that pydantic cannot express are collected into a single
``InvalidRequestError`` with one entry per offending field, so a client
learns about every problem in one round trip. Each stock or price change
appends a row to the stock history.
"""

import re

from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.config import settings
from inventory_api.exceptions import (
    ConflictError,
    DuplicateResourceError,
    InvalidRequestError,
    NotFoundError,
)
from inventory_api.logging import get_logger
from inventory_api.models import DELETION_REASONS, InventoryItem, StockChangeReason
from inventory_api.repositories import inventory as repo
from inventory_api.repositories.supplier import get_supplier
from inventory_api.schemas.inventory import (
    InventoryItemCreate,
    InventoryItemUpdate,
    PriceUpdate,
    QuantityAdjustment,
)
from inventory_api.schemas.pagination import Paginated
from inventory_api.services import stock_history
from inventory_api.services.concurrency import expect_version

logger = get_logger(__name__)

SKU_PATTERN = re.compile(r"[A-Z0-9][A-Z0-9-]{1,39}")

USER_EDITABLE_FIELDS = "Users are only allowed to change quantity or price."

STOCK_REMAINING = (
    "You still have merchandise in stock. "
    "You need to first remove items from stock by changing quantity."
)

# Reasons reserved for system-generated history rows
_NON_ADJUSTMENT_REASONS = frozenset(
    {StockChangeReason.INITIAL_STOCK, StockChangeReason.PRICE_CHANGE}
)


async def get_items(
    db: AsyncSession, skip: int, limit: int, supplier_id: int | None = None
) -> Paginated[InventoryItem]:
    items = await repo.list_items(db, skip, limit, supplier_id)
    total = await repo.count_items(db, supplier_id)
    return Paginated(items=items, total=total, skip=skip, limit=limit)


async def get_item(db: AsyncSession, item_id: int) -> InventoryItem:
    item = await repo.get_item(db, item_id)
    if item is None:
        raise NotFoundError("InventoryItem", item_id)
    return item


async def search_items(
    db: AsyncSession, name: str, skip: int, limit: int
) -> Paginated[InventoryItem]:
    """Items whose name contains ``name``, cheapest first."""
    name = name.strip()
    items = await repo.search_by_name(db, name, skip, limit)
    total = await repo.count_by_name(db, name)
    return Paginated(items=items, total=total, skip=skip, limit=limit)


def normalize_sku(sku: str) -> str:
    return sku.strip().upper()


def validate_new_item(payload: InventoryItemCreate) -> None:
    """Raise ``InvalidRequestError`` listing every invalid field of ``payload``.

    A malformed SKU on its own keeps the ``INVALID_FORMAT`` code.
    """
    field_errors: dict[str, str] = {}
    if not payload.name.strip():
        field_errors["name"] = "must not be blank"
    if not SKU_PATTERN.fullmatch(normalize_sku(payload.sku)):
        sku_error = InvalidRequestError.invalid_format("sku", SKU_PATTERN.pattern)
        if not field_errors:
            raise sku_error
        field_errors.update(sku_error.field_errors)
    if field_errors:
        raise InvalidRequestError.field_validation(field_errors)


async def create_item(
    db: AsyncSession, payload: InventoryItemCreate, username: str
) -> InventoryItem:
    validate_new_item(payload)
    name = payload.name.strip()
    sku = normalize_sku(payload.sku)

    if await get_supplier(db, payload.supplier_id) is None:
        raise NotFoundError("Supplier", payload.supplier_id)
    if await repo.find_by_sku(db, sku) is not None:
        raise DuplicateResourceError.inventory_item_sku(sku)
    if await repo.find_by_supplier_and_name(db, payload.supplier_id, name) is not None:
        raise DuplicateResourceError.inventory_item_name(name)

    minimum_quantity = payload.minimum_quantity
    if minimum_quantity <= 0:
        minimum_quantity = settings.default_minimum_quantity

    item = InventoryItem(
        name=name,
        sku=sku,
        quantity=payload.quantity,
        price=payload.price,
        minimum_quantity=minimum_quantity,
        supplier_id=payload.supplier_id,
        created_by=username,
    )
    db.add(item)
    await db.flush()
    stock_history.record_change(
        db, item, payload.quantity, StockChangeReason.INITIAL_STOCK, username
    )
    await db.flush()
    await db.refresh(item)
    logger.info("inventory_item_created", item_id=item.id, sku=sku, created_by=username)
    return item


async def adjust_quantity(
    db: AsyncSession, item_id: int, adjustment: QuantityAdjustment, username: str
) -> InventoryItem:
    if adjustment.reason in _NON_ADJUSTMENT_REASONS:
        raise ValueError(f"Invalid reason for quantity change: {adjustment.reason.value}")
    if adjustment.delta == 0:
        raise InvalidRequestError("Quantity change must not be zero")

    item = await get_item(db, item_id)
    new_quantity = item.quantity + adjustment.delta
    if new_quantity < 0:
        raise InvalidRequestError.business_rule_violation(
            f"Insufficient stock: {item.quantity} available"
        )

    expect_version(item, adjustment.version)
    item.quantity = new_quantity
    stock_history.record_change(db, item, adjustment.delta, adjustment.reason, username)
    await db.flush()
    await db.refresh(item)
    logger.info(
        "inventory_quantity_adjusted",
        item_id=item.id,
        delta=adjustment.delta,
        reason=adjustment.reason.value,
    )
    return item


async def update_price(
    db: AsyncSession, item_id: int, update: PriceUpdate, username: str
) -> InventoryItem:
    item = await get_item(db, item_id)
    expect_version(item, update.version)
    item.price = update.price
    stock_history.record_change(
        db, item, 0, StockChangeReason.PRICE_CHANGE, username, price=update.price
    )
    await db.flush()
    await db.refresh(item)
    logger.info("inventory_price_updated", item_id=item.id, price=str(update.price))
    return item


async def update_item(
    db: AsyncSession,
    item_id: int,
    payload: InventoryItemUpdate,
    username: str,
    is_admin: bool,
) -> InventoryItem:
    """Replace an item's editable fields.

    Only admins may rename an item or move it to another supplier; a
    non-admin request that changes either is rejected as a security
    violation. A renamed item must stay unique within its supplier. Quantity
    and price changes are written to the stock history like their dedicated
    endpoints do.
    """
    name = payload.name.strip()
    if not name:
        raise InvalidRequestError.required_field("name")

    item = await get_item(db, item_id)
    renamed = name != item.name
    moved = payload.supplier_id != item.supplier_id
    if (renamed or moved) and not is_admin:
        raise InvalidRequestError.security_violation(USER_EDITABLE_FIELDS)

    if moved and await get_supplier(db, payload.supplier_id) is None:
        raise NotFoundError("Supplier", payload.supplier_id)
    if renamed or moved:
        existing = await repo.find_by_supplier_and_name(db, payload.supplier_id, name)
        if existing is not None and existing.id != item.id:
            raise DuplicateResourceError.inventory_item_name(name)

    expect_version(item, payload.version)
    delta = payload.quantity - item.quantity
    price_changed = payload.price != item.price
    item.name = name
    item.supplier_id = payload.supplier_id
    item.quantity = payload.quantity
    item.price = payload.price
    item.minimum_quantity = payload.minimum_quantity

    if delta:
        stock_history.record_change(db, item, delta, StockChangeReason.MANUAL_UPDATE, username)
    if price_changed:
        stock_history.record_change(
            db, item, 0, StockChangeReason.PRICE_CHANGE, username, price=payload.price
        )
    await db.flush()
    await db.refresh(item)
    logger.info("inventory_item_updated", item_id=item.id, version=item.version)
    return item


async def delete_item(
    db: AsyncSession, item_id: int, reason: StockChangeReason, username: str
) -> None:
    """Remove an item whose stock has already been drawn down to zero.

    The removal is recorded in the stock history under ``reason`` before the
    row is deleted; history rows are kept after the item is gone.
    """
    if reason not in DELETION_REASONS:
        raise ValueError("Invalid reason for deletion")

    item = await get_item(db, item_id)
    if item.quantity > 0:
        raise ConflictError(STOCK_REMAINING)

    stock_history.record_change(db, item, -item.quantity, reason, username)
    await db.delete(item)
    await db.flush()
    logger.info("inventory_item_deleted", item_id=item_id, reason=reason.value)

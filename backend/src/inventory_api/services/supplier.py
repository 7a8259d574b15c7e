"""Supplier business logic.

Enforces the supplier rules and signals violations with domain exceptions:

- names are required and unique regardless of case (``DuplicateResourceError``)
- a supplier with linked inventory items cannot be deleted (``ConflictError``)
- missing suppliers raise ``NotFoundError``
"""

from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.exceptions import (
    ConflictError,
    DuplicateResourceError,
    InvalidRequestError,
    NotFoundError,
)
from inventory_api.logging import get_logger
from inventory_api.models import Supplier
from inventory_api.repositories import supplier as repo
from inventory_api.schemas.pagination import Paginated
from inventory_api.schemas.supplier import SupplierCreate, SupplierUpdate
from inventory_api.services.concurrency import expect_version

logger = get_logger(__name__)


async def get_suppliers(
    db: AsyncSession, skip: int, limit: int, name: str | None = None
) -> Paginated[Supplier]:
    items = await repo.list_suppliers(db, skip, limit, name)
    total = await repo.count_suppliers(db, name)
    return Paginated(items=items, total=total, skip=skip, limit=limit)


async def get_supplier(db: AsyncSession, supplier_id: int) -> Supplier:
    supplier = await repo.get_supplier(db, supplier_id)
    if supplier is None:
        raise NotFoundError("Supplier", supplier_id)
    return supplier


def _required_name(name: str) -> str:
    trimmed = name.strip()
    if not trimmed:
        raise InvalidRequestError.required_field("name")
    return trimmed


async def _assert_unique_name(db: AsyncSession, name: str, exclude_id: int | None) -> None:
    existing = await repo.find_by_name_ignore_case(db, name)
    if existing is not None and existing.id != exclude_id:
        raise DuplicateResourceError.supplier_name(name)


async def create_supplier(db: AsyncSession, payload: SupplierCreate, username: str) -> Supplier:
    name = _required_name(payload.name)
    await _assert_unique_name(db, name, exclude_id=None)

    supplier = Supplier(
        name=name,
        contact_name=payload.contact_name,
        phone=payload.phone,
        email=payload.email,
        created_by=username,
    )
    db.add(supplier)
    await db.flush()
    await db.refresh(supplier)
    logger.info("supplier_created", supplier_id=supplier.id, created_by=username)
    return supplier


async def update_supplier(
    db: AsyncSession, supplier_id: int, payload: SupplierUpdate
) -> Supplier:
    """Replace a supplier's editable fields.

    When ``payload.version`` is set the write only succeeds if the stored
    version still matches; otherwise the flush raises ``StaleDataError``.
    """
    supplier = await get_supplier(db, supplier_id)
    name = _required_name(payload.name)
    await _assert_unique_name(db, name, exclude_id=supplier.id)

    expect_version(supplier, payload.version)
    supplier.name = name
    supplier.contact_name = payload.contact_name
    supplier.phone = payload.phone
    supplier.email = payload.email

    await db.flush()
    await db.refresh(supplier)
    logger.info("supplier_updated", supplier_id=supplier.id, version=supplier.version)
    return supplier


async def delete_supplier(db: AsyncSession, supplier_id: int) -> None:
    supplier = await get_supplier(db, supplier_id)
    if await repo.has_linked_items(db, supplier.id):
        raise ConflictError("Cannot delete supplier with linked items")
    await db.delete(supplier)
    await db.flush()
    logger.info("supplier_deleted", supplier_id=supplier_id)

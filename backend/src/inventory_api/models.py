"""SQLAlchemy models.

Define all ORM models here. They must inherit from Base so that
Alembic's autogenerate can detect them.

Suppliers and inventory items carry a ``version`` column used for
optimistic locking: an UPDATE whose expected version no longer matches
raises ``StaleDataError``, which the handler chain maps to 409.
"""

from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory_api.db.session import Base  # noqa: F401 re-exported for convenience


class StockChangeReason(StrEnum):
    INITIAL_STOCK = "INITIAL_STOCK"
    MANUAL_UPDATE = "MANUAL_UPDATE"
    PRICE_CHANGE = "PRICE_CHANGE"
    SOLD = "SOLD"
    SCRAPPED = "SCRAPPED"
    DESTROYED = "DESTROYED"
    DAMAGED = "DAMAGED"
    EXPIRED = "EXPIRED"
    LOST = "LOST"
    RETURNED_TO_SUPPLIER = "RETURNED_TO_SUPPLIER"
    RETURNED_BY_CUSTOMER = "RETURNED_BY_CUSTOMER"


# Reasons accepted when an item is removed from the catalogue
DELETION_REASONS = frozenset(
    {
        StockChangeReason.SCRAPPED,
        StockChangeReason.DESTROYED,
        StockChangeReason.DAMAGED,
        StockChangeReason.EXPIRED,
        StockChangeReason.LOST,
        StockChangeReason.RETURNED_TO_SUPPLIER,
    }
)


class Supplier(Base):
    __tablename__ = "suppliers"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)
    contact_name: Mapped[str | None] = mapped_column(String(100))
    phone: Mapped[str | None] = mapped_column(String(30))
    email: Mapped[str | None] = mapped_column(String(254))
    created_by: Mapped[str] = mapped_column(String(100))
    version: Mapped[int] = mapped_column(nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # passive_deletes: linked items are checked by the service, never loaded on delete
    items: Mapped[list["InventoryItem"]] = relationship(
        back_populates="supplier", passive_deletes=True
    )

    __mapper_args__ = {"version_id_col": version}


class InventoryItem(Base):
    __tablename__ = "inventory_items"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="quantity_non_negative"),
        CheckConstraint("price > 0", name="price_positive"),
        CheckConstraint("minimum_quantity >= 0", name="minimum_quantity_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    sku: Mapped[str] = mapped_column(String(40), unique=True)
    quantity: Mapped[int]
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    minimum_quantity: Mapped[int]
    supplier_id: Mapped[int] = mapped_column(ForeignKey("suppliers.id"), index=True)
    created_by: Mapped[str] = mapped_column(String(100))
    version: Mapped[int] = mapped_column(nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    supplier: Mapped["Supplier"] = relationship(back_populates="items")

    __mapper_args__ = {"version_id_col": version}


class StockHistory(Base):
    """Append-only audit record of a stock or price change."""

    __tablename__ = "stock_history"

    id: Mapped[int] = mapped_column(primary_key=True)
    # No FK: audit rows outlive the items they describe
    item_id: Mapped[int] = mapped_column(index=True)
    item_name: Mapped[str] = mapped_column(String(100))
    # Copied from the item so supplier searches still find deleted items' rows
    supplier_id: Mapped[int | None] = mapped_column(index=True)
    change: Mapped[int]
    reason: Mapped[str] = mapped_column(String(40))
    price_at_change: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    created_by: Mapped[str] = mapped_column(String(100))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

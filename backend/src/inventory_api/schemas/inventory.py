"""Inventory item request and response schemas.

Only shape and range checks live here. Rules that need the database or
look at several fields together (SKU format, duplicates, stock going
negative) are enforced by ``services.inventory`` so they surface as
domain exceptions with field-level context.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from inventory_api.models import StockChangeReason
from inventory_api.schemas.pagination import PaginatedResponse


class InventoryItemCreate(BaseModel):
    name: str = Field(max_length=100)
    sku: str = Field(max_length=40)
    quantity: int = Field(ge=0)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    minimum_quantity: int = Field(default=0, ge=0)
    supplier_id: int


class InventoryItemUpdate(BaseModel):
    """Full replacement of an item's editable fields. The SKU never changes.

    Name and supplier may only be changed by admins.
    """

    name: str = Field(max_length=100)
    quantity: int = Field(ge=0)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    minimum_quantity: int = Field(ge=0)
    supplier_id: int
    version: int | None = Field(default=None, ge=1)


class QuantityAdjustment(BaseModel):
    """Relative stock change; negative values remove stock."""

    delta: int
    reason: StockChangeReason = StockChangeReason.MANUAL_UPDATE
    version: int | None = Field(default=None, ge=1)


class PriceUpdate(BaseModel):
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    version: int | None = Field(default=None, ge=1)


class InventoryItemResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    sku: str
    quantity: int
    price: Decimal
    minimum_quantity: int
    supplier_id: int
    created_by: str
    version: int
    created_at: datetime
    updated_at: datetime


InventoryItemListResponse = PaginatedResponse[InventoryItemResponse]

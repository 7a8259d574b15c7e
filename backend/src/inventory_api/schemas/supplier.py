"""Supplier request and response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from inventory_api.schemas.pagination import PaginatedResponse


class SupplierCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    contact_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=30)
    email: str | None = Field(default=None, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")


class SupplierUpdate(SupplierCreate):
    """Full replacement of a supplier's editable fields.

    ``version`` is the value the client last read; when present, the update
    fails with 409 if someone else changed the supplier in the meantime.
    """

    version: int | None = Field(default=None, ge=1)


class SupplierResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    contact_name: str | None
    phone: str | None
    email: str | None
    created_by: str
    version: int
    created_at: datetime
    updated_at: datetime


SupplierListResponse = PaginatedResponse[SupplierResponse]

"""Supplier endpoints.

Routers stay thin: they authenticate, call the service, and serialize.
Every failure propagates to the exception handler chain.
"""

from fastapi import APIRouter, Response

from inventory_api.dependencies import DB, AdminUser, CurrentUser, Limit, Skip
from inventory_api.schemas.supplier import (
    SupplierCreate,
    SupplierListResponse,
    SupplierResponse,
    SupplierUpdate,
)
from inventory_api.services import supplier as service

router = APIRouter(prefix="/api/suppliers", tags=["suppliers"])


@router.get("", response_model=SupplierListResponse, status_code=200)
async def list_suppliers(
    db: DB,
    user: CurrentUser,
    skip: Skip = 0,
    limit: Limit = 20,
    name: str | None = None,
) -> SupplierListResponse:
    """List suppliers, optionally filtered by a case-insensitive name fragment."""
    result = await service.get_suppliers(db, skip, limit, name)
    return SupplierListResponse.model_validate(result)


@router.get("/{supplier_id}", response_model=SupplierResponse)
async def get_supplier(supplier_id: int, db: DB, user: CurrentUser) -> SupplierResponse:
    supplier = await service.get_supplier(db, supplier_id)
    return SupplierResponse.model_validate(supplier)


@router.post("", response_model=SupplierResponse, status_code=201)
async def create_supplier(payload: SupplierCreate, db: DB, user: CurrentUser) -> SupplierResponse:
    supplier = await service.create_supplier(db, payload, user.username)
    return SupplierResponse.model_validate(supplier)


@router.put("/{supplier_id}", response_model=SupplierResponse)
async def update_supplier(
    supplier_id: int, payload: SupplierUpdate, db: DB, user: CurrentUser
) -> SupplierResponse:
    supplier = await service.update_supplier(db, supplier_id, payload)
    return SupplierResponse.model_validate(supplier)


@router.delete("/{supplier_id}", status_code=204)
async def delete_supplier(supplier_id: int, db: DB, admin: AdminUser) -> Response:
    await service.delete_supplier(db, supplier_id)
    return Response(status_code=204)

"""Generic pagination types shared by all list endpoints.

PaginatedResponse[T]: Pydantic model for HTTP responses (serializable).
Paginated[T]: plain dataclass for service-layer returns.

Services return ``Paginated[Supplier]``; routers convert with
``SupplierListResponse.model_validate(result)``, which reads the dataclass
attributes thanks to ``from_attributes``.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """Pydantic model for paginated HTTP responses.

    Subscript it per entity instead of subclassing::

        SupplierListResponse = PaginatedResponse[SupplierResponse]
    """

    model_config = {"from_attributes": True}

    items: list[T]
    total: int
    skip: int
    limit: int


@dataclass
class Paginated(Generic[T]):
    """A page of ORM objects plus the paging window that produced it.

    A dataclass instead of a Pydantic model because services shouldn't
    know about serialization.
    """

    items: list[T]
    total: int
    skip: int
    limit: int

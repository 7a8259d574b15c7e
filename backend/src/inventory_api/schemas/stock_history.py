"""Stock history response schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from inventory_api.schemas.pagination import PaginatedResponse


class StockHistoryResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    item_id: int
    item_name: str
    supplier_id: int | None
    change: int
    reason: str
    price_at_change: Decimal | None
    created_by: str
    created_at: datetime


StockHistoryListResponse = PaginatedResponse[StockHistoryResponse]

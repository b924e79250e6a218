from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional

from b2b_pricing.enums.commercial import OrderStatus
from b2b_pricing.schemas.checkout import CartLine, OrderSnapshot


class OrderResponse(BaseModel):
    order_id: str
    user_id: str
    business_name: Optional[str] = None
    items: List[CartLine]
    total_amount: float
    commission_value: float
    gaddi_id: Optional[str] = None
    payment_method: Optional[str] = None
    status: OrderStatus
    snapshot_data: OrderSnapshot
    amends_order_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class OrderStatusUpdate(BaseModel):
    status: OrderStatus

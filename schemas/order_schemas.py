from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict
from models.orders import OrderStatus


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_date: datetime
    total_amount: Decimal
    status: OrderStatus
    items_snapshot: str
    shipping_snapshot: str


class CheckoutSessionResponse(BaseModel):
    session_id: str
    redirect_url: str


class PaymentResultResponse(BaseModel):
    message: str
    redirect_to: str
    already_fulfilled: bool = False
    order: Optional[OrderResponse] = None


class UpdateOrderStatusRequest(BaseModel):
    status: Literal["SHIPPED", "DELIVERED"]

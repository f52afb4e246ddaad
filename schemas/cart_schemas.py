from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class AddCartItemRequest(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=1, le=99)


class UpdateCartItemRequest(BaseModel):
    # 0 removes the line
    quantity: int = Field(ge=0, le=99)


class CartLineResponse(BaseModel):
    product_id: int
    name: str
    image_url: Optional[str] = None
    unit_price: Decimal
    quantity: int
    line_total: Decimal


class CartResponse(BaseModel):
    items: list[CartLineResponse]
    item_count: int
    subtotal: Decimal


class WishlistItemResponse(BaseModel):
    product_id: int
    name: str
    price: Decimal
    image_url: Optional[str] = None
    is_available: bool

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

SortOption = Literal["latest", "oldest", "priceAsc", "priceDesc"]
StockStatus = Literal["inStock", "lowStock", "onSale"]


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    price: Decimal
    category: str
    image_url: Optional[str] = None
    color: Optional[str] = None
    stock_quantity: int
    sku: Optional[str] = None
    size_options: Optional[str] = None
    is_available: bool
    created_at: Optional[datetime] = None


class ProductDetailResponse(BaseModel):
    product: ProductResponse
    related_products: list[ProductResponse]


class ProductCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    category: str = Field(min_length=1, max_length=100)
    image_url: Optional[str] = None
    color: Optional[str] = None
    stock_quantity: int = Field(ge=0)
    sku: Optional[str] = None
    size_options: Optional[str] = None
    is_available: bool = True


class ProductUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    category: Optional[str] = None
    image_url: Optional[str] = None
    color: Optional[str] = None
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    sku: Optional[str] = None
    size_options: Optional[str] = None
    is_available: Optional[bool] = None

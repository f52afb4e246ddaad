from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from schemas.auth_schemas import check_password_strength
from schemas.product_schemas import ProductResponse


class AdminCredentialsRequest(BaseModel):
    new_username: str = Field(min_length=3, max_length=255)
    new_password: str
    confirm_password: str

    @field_validator('new_username')
    @classmethod
    def clean_username(cls, value):
        return value.strip().lower()

    @field_validator('new_password')
    @classmethod
    def validate_password(cls, value):
        return check_password_strength(value)


class AdminProfileResponse(BaseModel):
    id: int
    username: str
    credentials_updated: bool


class AdminDashboardResponse(BaseModel):
    products: list[ProductResponse]
    categories: list[str]
    force_update_message: Optional[str] = None


class CouponCreateRequest(BaseModel):
    code: str = Field(min_length=3, max_length=50)
    description: str
    discount_percent: int = Field(gt=0, le=100)
    expires_at: Optional[datetime] = None

    @field_validator('code')
    @classmethod
    def clean_code(cls, value):
        return value.strip().upper()


class GiftCardIssueRequest(BaseModel):
    user_id: int
    balance: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    expires_at: Optional[datetime] = None

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from schemas.auth_schemas import normalize_email, normalize_phone_number


class UserProfileResponse(BaseModel):
    id: int
    email: str
    role: str
    is_verified: bool
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    preferred_size: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[date] = None
    newsletter_opt_in: bool = False


class UpdateProfileRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    preferred_size: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[date] = None
    newsletter_opt_in: Optional[bool] = None

    @field_validator('phone_number')
    @classmethod
    def validate_phone(cls, value):
        if value is None:
            return value
        return normalize_phone_number(value)


class ChangeEmailRequest(BaseModel):
    new_email: EmailStr

    @field_validator('new_email', mode='before')
    @classmethod
    def clean_email(cls, value):
        return normalize_email(value)


class VerifyNewEmailRequest(ChangeEmailRequest):
    code: str

    @field_validator('code')
    @classmethod
    def validate_code(cls, value):
        value = value.strip()
        if len(value) != 6 or not value.isdigit():
            raise ValueError('must be a 6-digit code')
        return value


class PendingEmailChangeResponse(BaseModel):
    new_email: str
    pending: bool
    message: str


class AddressRequest(BaseModel):
    id: Optional[int] = None    # present when updating an existing address
    full_name: str
    line1: str
    line2: Optional[str] = None
    city: str
    state: str
    postal_code: str
    country: str = "India"
    phone_number: Optional[str] = None
    is_default: bool = False


class AddressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    line1: str
    line2: Optional[str] = None
    city: str
    state: str
    postal_code: str
    country: str
    phone_number: Optional[str] = None
    is_default: bool


class CouponResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: str
    description: str
    discount_percent: int
    expires_at: Optional[datetime] = None


class GiftCardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: str
    balance: Decimal
    expires_at: Optional[datetime] = None

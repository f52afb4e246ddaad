from datetime import date
from typing import Optional
from pydantic import BaseModel, EmailStr, field_validator
import phonenumbers
import re


def check_password_strength(value: str) -> str:
    """
    Password must be at least 8 characters and contain:
    - At least one letter
    - At least one digit
    """
    if len(value) < 8:
        raise ValueError('Password must be at least 8 characters')

    if not re.search(r'[A-Za-z]', value):
        raise ValueError('Password must contain at least one letter')

    if not re.search(r'\d', value):
        raise ValueError('Password must contain at least one digit')

    return value


def normalize_phone_number(value: str) -> str:
    """
    Validates phone number format using Google's phonenumbers library and
    returns it in E.164 form (+919876543210).
    """
    try:
        parsed = phonenumbers.parse(value, None)
        if not phonenumbers.is_valid_number(parsed):
            raise ValueError('Invalid phone number')

        return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)

    except phonenumbers.NumberParseException:
        raise ValueError('Phone number must include country code (e.g.: +91xxxxxxxxxx, +20xxxxxxxxxx)')


def normalize_email(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str


class LoginResponse(Token):
    role: str
    redirect_to: str
    password_change_required: bool = False


class CreateUserRequest(BaseModel):
    email: EmailStr
    password: str
    confirm_password: str
    first_name: str
    last_name: str
    phone_number: str
    preferred_size: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[date] = None
    newsletter_opt_in: bool = False
    terms_accepted: bool = False

    @field_validator('email', mode='before')
    @classmethod
    def clean_email(cls, value):
        return normalize_email(value)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value):
        return check_password_strength(value)

    @field_validator('phone_number')
    @classmethod
    def validate_phone(cls, value):
        return normalize_phone_number(value)

    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_name(cls, value):
        if not value.strip():
            raise ValueError('Name cannot be empty')
        return value.strip()


class VerifyEmailRequest(BaseModel):
    email: EmailStr
    code: str

    @field_validator('email', mode='before')
    @classmethod
    def clean_email(cls, value):
        return normalize_email(value)

    @field_validator('code')
    @classmethod
    def validate_code(cls, value):
        value = value.strip()
        if len(value) != 6 or not value.isdigit():
            raise ValueError('must be a 6-digit code')
        return value


class ResendCodeRequest(BaseModel):
    identifier: str

    @field_validator('identifier')
    @classmethod
    def validate_identifier(cls, value):
        if not value or not value.strip():
            raise ValueError('Identifier cannot be empty')
        return value.strip()


class RefreshTokenRequest(BaseModel):
    refresh_token: str

    @field_validator('refresh_token')
    @classmethod
    def validate_token(cls, value):
        if not value or not value.strip():
            raise ValueError('Refresh token cannot be empty')
        return value


class RevokeTokenRequest(RefreshTokenRequest):
    pass


class ForgotPasswordRequest(ResendCodeRequest):
    pass


class ResetPasswordRequest(VerifyEmailRequest):
    new_password: str
    confirm_password: str

    @field_validator('new_password')
    @classmethod
    def validate_password(cls, value):
        return check_password_strength(value)


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str
    confirm_password: str

    @field_validator('new_password')
    @classmethod
    def validate_password(cls, value):
        return check_password_strength(value)

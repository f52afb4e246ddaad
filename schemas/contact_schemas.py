from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from schemas.auth_schemas import normalize_email


class ContactMessageRequest(BaseModel):
    name: str = Field(max_length=200)
    email: EmailStr
    subject: str = Field(max_length=255)
    message: str = Field(max_length=5000)

    @field_validator('email', mode='before')
    @classmethod
    def clean_email(cls, value):
        return normalize_email(value)

    @field_validator('name', 'subject', 'message')
    @classmethod
    def not_blank(cls, value):
        value = value.strip()
        if not value:
            raise ValueError('must not be empty')
        return value


class ContactMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    subject: str
    message: str
    created_at: datetime

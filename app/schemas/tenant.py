from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import date, datetime
from app.schemas.common import blank_to_none

class TenantBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=255)
    unit_id: Optional[int] = None
    rent_start_date: Optional[date] = None

    @field_validator("email", "phone", "address", "rent_start_date", mode="before")
    @classmethod
    def empty_string_is_none(cls, v):
        return blank_to_none(v)

class TenantCreate(TenantBase):
    pass

class TenantUpdate(TenantBase):
    rent_end_date: Optional[date] = None
    active: bool = True

    @field_validator("rent_end_date", mode="before")
    @classmethod
    def empty_end_date_is_none(cls, v):
        return blank_to_none(v)

class TenantResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    unit_id: Optional[int] = None
    rent_start_date: Optional[date] = None
    rent_end_date: Optional[date] = None
    active: bool
    unit_name: Optional[str] = None
    unit_type: Optional[str] = None
    property_address: Optional[str] = None
    property_type: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

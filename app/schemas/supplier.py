# schemas/supplier.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.common import blank_to_none
from app.schemas.product import ProductSummary

PHONE_PATTERN = r"^\+?\(?\d[\d\s().\-]*$"


class SupplierCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    contact: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20, pattern=PHONE_PATTERN)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, max_length=200)
    active: bool = True

    @field_validator("contact", "phone", "email", "address", mode="before")
    @classmethod
    def blank_optionals(cls, value):
        return blank_to_none(value)

    @field_validator("email")
    @classmethod
    def email_length(cls, value):
        if value is not None and len(value) > 100:
            raise ValueError("Email cannot exceed 100 characters")
        return value

    class Config:
        str_strip_whitespace = True


class SupplierUpdate(SupplierCreate):
    id: int
    version: Optional[int] = None


class SupplierResponse(BaseModel):
    id: int
    name: str
    contact: Optional[str]
    phone: Optional[str]
    email: Optional[str]
    address: Optional[str]
    active: bool
    registered_at: datetime
    version: int

    class Config:
        from_attributes = True


class SupplierDetailResponse(SupplierResponse):
    products: List[ProductSummary] = []


class SupplierRankingResponse(SupplierResponse):
    product_count: int

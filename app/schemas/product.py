# schemas/product.py

from decimal import Decimal
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import blank_to_none


class CategoryRef(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class SupplierRef(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    code: str = Field(..., min_length=1, max_length=50)

    price: Decimal = Field(
        ...,
        gt=0,
        max_digits=18,
        decimal_places=2,
        description="Unit price, greater than zero with at most 2 decimals",
    )

    stock: int = Field(..., ge=0, description="Units in stock")

    category_id: int
    supplier_id: int

    @field_validator("description", mode="before")
    @classmethod
    def blank_description(cls, value):
        return blank_to_none(value)

    class Config:
        str_strip_whitespace = True


class ProductUpdate(ProductCreate):
    id: int
    version: Optional[int] = Field(
        None,
        description="Version last read by the client; a mismatch is a concurrency conflict",
    )


class ProductSummary(BaseModel):
    id: int
    name: str
    code: str
    price: Decimal
    stock: int

    class Config:
        from_attributes = True


class ProductResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    code: str
    price: Decimal
    stock: int
    category_id: int
    supplier_id: int
    category: Optional[CategoryRef] = None
    supplier: Optional[SupplierRef] = None
    created_at: datetime
    updated_at: Optional[datetime]
    version: int

    class Config:
        from_attributes = True


class ProductFormOptions(BaseModel):
    categories: List[CategoryRef]
    suppliers: List[SupplierRef]

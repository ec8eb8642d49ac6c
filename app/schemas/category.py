# schemas/category.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import blank_to_none
from app.schemas.product import ProductSummary


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=300)
    active: bool = True

    @field_validator("description", mode="before")
    @classmethod
    def blank_description(cls, value):
        return blank_to_none(value)

    class Config:
        str_strip_whitespace = True


class CategoryUpdate(CategoryCreate):
    id: int
    version: Optional[int] = None


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    active: bool
    created_at: datetime
    version: int

    class Config:
        from_attributes = True


class CategoryDetailResponse(CategoryResponse):
    products: List[ProductSummary] = []


class CategoryRankingResponse(CategoryResponse):
    product_count: int

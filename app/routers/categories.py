# app/routers/categories.py

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.config import settings
from app.core.rate_limiter import limiter
from app.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryDetailResponse,
    CategoryRankingResponse,
)
from app.schemas.product import ProductSummary
from app.services import categories as category_service

router = APIRouter(
    prefix="/categories",
    tags=["Categories"],
)


@router.get("", response_model=list[CategoryResponse])
def list_categories(
    q: Optional[str] = Query(None, description="Substring of name or description"),
    active_only: bool = Query(True),
    db: Session = Depends(get_db),
):
    return category_service.list_categories(db, q=q, active_only=active_only)


@router.get("/most-products", response_model=list[CategoryRankingResponse])
def most_products(db: Session = Depends(get_db)):
    rows = category_service.categories_by_product_count(db)

    return [
        CategoryRankingResponse(
            **CategoryResponse.model_validate(category).model_dump(),
            product_count=product_count,
        )
        for category, product_count in rows
    ]


@router.get("/{category_id}", response_model=CategoryDetailResponse)
def get_category(
    category_id: int,
    db: Session = Depends(get_db),
):
    category, products = category_service.get_category(db, category_id)

    return CategoryDetailResponse(
        **CategoryResponse.model_validate(category).model_dump(),
        products=[ProductSummary.model_validate(product) for product in products],
    )


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.WRITE_RATE_LIMIT)
def create_category(
    request: Request,
    category_data: CategoryCreate,
    db: Session = Depends(get_db),
):
    return category_service.create_category(db, category_data)


@router.put("/{category_id}", response_model=CategoryResponse)
@limiter.limit(settings.WRITE_RATE_LIMIT)
def update_category(
    request: Request,
    category_id: int,
    category_data: CategoryUpdate,
    db: Session = Depends(get_db),
):
    return category_service.update_category(db, category_id, category_data)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(settings.WRITE_RATE_LIMIT)
def delete_category(
    request: Request,
    category_id: int,
    db: Session = Depends(get_db),
):
    category_service.delete_category(db, category_id)

    return None


# Retiring a category that still has products
@router.post("/{category_id}/toggle-active", response_model=CategoryResponse)
@limiter.limit(settings.WRITE_RATE_LIMIT)
def toggle_category_active(
    request: Request,
    category_id: int,
    db: Session = Depends(get_db),
):
    return category_service.toggle_category_active(db, category_id)

# app/routers/products.py

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.config import settings
from app.core.rate_limiter import limiter
from app.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductFormOptions,
)
from app.services import products as product_service

router = APIRouter(
    prefix="/products",
    tags=["Products"],
)


@router.get("", response_model=list[ProductResponse])
def list_products(
    q: Optional[str] = Query(None, description="Substring of name, code or description"),
    category_id: Optional[int] = Query(None),
    supplier_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    return product_service.list_products(
        db,
        q=q,
        category_id=category_id,
        supplier_id=supplier_id,
    )


@router.get("/low-stock", response_model=list[ProductResponse])
def low_stock(
    threshold: Optional[int] = Query(None, description="Defaults to LOW_STOCK_THRESHOLD"),
    db: Session = Depends(get_db),
):
    return product_service.low_stock_products(db, threshold=threshold)


@router.get("/options", response_model=ProductFormOptions)
def form_options(db: Session = Depends(get_db)):
    return product_service.product_form_options(db)


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
):
    return product_service.get_product(db, product_id)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.WRITE_RATE_LIMIT)
def create_product(
    request: Request,
    product_data: ProductCreate,
    db: Session = Depends(get_db),
):
    return product_service.create_product(db, product_data)


@router.put("/{product_id}", response_model=ProductResponse)
@limiter.limit(settings.WRITE_RATE_LIMIT)
def update_product(
    request: Request,
    product_id: int,
    product_data: ProductUpdate,
    db: Session = Depends(get_db),
):
    return product_service.update_product(db, product_id, product_data)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(settings.WRITE_RATE_LIMIT)
def delete_product(
    request: Request,
    product_id: int,
    db: Session = Depends(get_db),
):
    product_service.delete_product(db, product_id)

    return None

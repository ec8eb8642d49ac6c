# app/routers/suppliers.py

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.config import settings
from app.core.rate_limiter import limiter
from app.schemas.supplier import (
    SupplierCreate,
    SupplierUpdate,
    SupplierResponse,
    SupplierDetailResponse,
    SupplierRankingResponse,
)
from app.schemas.product import ProductSummary
from app.services import suppliers as supplier_service

router = APIRouter(
    prefix="/suppliers",
    tags=["Suppliers"],
)


@router.get("", response_model=list[SupplierResponse])
def list_suppliers(
    q: Optional[str] = Query(None, description="Substring of name, contact, email or phone"),
    active_only: bool = Query(True),
    db: Session = Depends(get_db),
):
    return supplier_service.list_suppliers(db, q=q, active_only=active_only)


@router.get("/most-products", response_model=list[SupplierRankingResponse])
def most_products(db: Session = Depends(get_db)):
    rows = supplier_service.suppliers_by_product_count(db)

    return [
        SupplierRankingResponse(
            **SupplierResponse.model_validate(supplier).model_dump(),
            product_count=product_count,
        )
        for supplier, product_count in rows
    ]


@router.get("/contacts", response_model=list[SupplierResponse])
def contact_directory(db: Session = Depends(get_db)):
    return supplier_service.contact_directory(db)


@router.get("/{supplier_id}", response_model=SupplierDetailResponse)
def get_supplier(
    supplier_id: int,
    db: Session = Depends(get_db),
):
    supplier, products = supplier_service.get_supplier(db, supplier_id)

    return SupplierDetailResponse(
        **SupplierResponse.model_validate(supplier).model_dump(),
        products=[ProductSummary.model_validate(product) for product in products],
    )


@router.post(
    "",
    response_model=SupplierResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.WRITE_RATE_LIMIT)
def create_supplier(
    request: Request,
    supplier_data: SupplierCreate,
    db: Session = Depends(get_db),
):
    return supplier_service.create_supplier(db, supplier_data)


@router.put("/{supplier_id}", response_model=SupplierResponse)
@limiter.limit(settings.WRITE_RATE_LIMIT)
def update_supplier(
    request: Request,
    supplier_id: int,
    supplier_data: SupplierUpdate,
    db: Session = Depends(get_db),
):
    return supplier_service.update_supplier(db, supplier_id, supplier_data)


@router.delete("/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(settings.WRITE_RATE_LIMIT)
def delete_supplier(
    request: Request,
    supplier_id: int,
    db: Session = Depends(get_db),
):
    supplier_service.delete_supplier(db, supplier_id)

    return None


@router.post("/{supplier_id}/toggle-active", response_model=SupplierResponse)
@limiter.limit(settings.WRITE_RATE_LIMIT)
def toggle_supplier_active(
    request: Request,
    supplier_id: int,
    db: Session = Depends(get_db),
):
    return supplier_service.toggle_supplier_active(db, supplier_id)

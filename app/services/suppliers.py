# app/services/suppliers.py

import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.core.errors import DependentsExist, FieldError, ValidationFailed
from app.models.products import Product
from app.models.suppliers import Supplier
from app.schemas.supplier import SupplierCreate, SupplierUpdate
from app.services.common import (
    commit_new,
    commit_versioned,
    ensure_same_id,
    ensure_version,
    get_or_404,
    store_guard,
    text_filter,
    validation_error,
)

logger = logging.getLogger("app.services.suppliers")

ENTITY = "Supplier"


def _taken(db: Session, column, value, exclude_id: int | None) -> bool:
    query = db.query(Supplier.id).filter(column == value)
    if exclude_id is not None:
        query = query.filter(Supplier.id != exclude_id)
    return query.first() is not None


def _uniqueness_errors(db: Session, data: SupplierCreate, exclude_id: int | None = None):
    # Every rule is checked so the caller sees all duplicated fields at once
    errors = []

    if _taken(db, Supplier.name, data.name, exclude_id):
        errors.append(FieldError("name", "A supplier with this name already exists"))

    if data.email and _taken(db, Supplier.email, data.email, exclude_id):
        errors.append(FieldError("email", "A supplier with this email already exists"))

    if data.phone and _taken(db, Supplier.phone, data.phone, exclude_id):
        errors.append(FieldError("phone", "A supplier with this phone already exists"))

    return errors


def _product_count(db: Session, supplier_id: int) -> int:
    return (
        db.query(func.count(Product.id))
        .filter(Product.supplier_id == supplier_id)
        .scalar()
    )


def _dependents_error(db: Session, supplier_id: int):
    count = _product_count(db, supplier_id)
    return DependentsExist(ENTITY, supplier_id, count) if count else None


@store_guard
def list_suppliers(db: Session, q: str | None = None, active_only: bool = True):
    query = text_filter(
        db.query(Supplier),
        q,
        Supplier.name,
        Supplier.contact,
        Supplier.email,
        Supplier.phone,
    )

    if active_only:
        query = query.filter(Supplier.active.is_(True))

    return query.order_by(Supplier.name).all()


@store_guard
def get_supplier(db: Session, supplier_id: int):
    """Return the supplier and its products, ordered by product name."""
    supplier = get_or_404(db, Supplier, supplier_id, ENTITY)

    products = (
        db.query(Product)
        .filter(Product.supplier_id == supplier.id)
        .order_by(Product.name)
        .all()
    )

    return supplier, products


def _apply(supplier: Supplier, data: SupplierCreate):
    supplier.name = data.name
    supplier.contact = data.contact
    supplier.phone = data.phone
    supplier.email = data.email
    supplier.address = data.address
    supplier.active = data.active


@store_guard
def create_supplier(db: Session, data: SupplierCreate) -> Supplier:
    errors = _uniqueness_errors(db, data)
    if errors:
        raise ValidationFailed(errors)

    supplier = Supplier()
    _apply(supplier, data)

    db.add(supplier)
    commit_new(db, explain=lambda: validation_error(_uniqueness_errors(db, data)))
    db.refresh(supplier)

    logger.info(f"Supplier created id={supplier.id} name={supplier.name!r}")
    return supplier


@store_guard
def update_supplier(db: Session, supplier_id: int, data: SupplierUpdate) -> Supplier:
    ensure_same_id(supplier_id, data.id)

    supplier = get_or_404(db, Supplier, supplier_id, ENTITY)
    ensure_version(supplier, data.version, ENTITY)

    errors = _uniqueness_errors(db, data, exclude_id=supplier_id)
    if errors:
        raise ValidationFailed(errors)

    # registered_at is fixed at registration and never rewritten
    _apply(supplier, data)

    commit_versioned(
        db,
        Supplier,
        supplier_id,
        ENTITY,
        explain=lambda: validation_error(_uniqueness_errors(db, data, exclude_id=supplier_id)),
    )
    db.refresh(supplier)

    logger.info(f"Supplier updated id={supplier.id}")
    return supplier


@store_guard
def delete_supplier(db: Session, supplier_id: int) -> None:
    supplier = get_or_404(db, Supplier, supplier_id, ENTITY)

    dependents = _dependents_error(db, supplier_id)
    if dependents:
        raise dependents

    db.delete(supplier)
    commit_versioned(
        db,
        Supplier,
        supplier_id,
        ENTITY,
        explain=lambda: _dependents_error(db, supplier_id),
    )

    logger.info(f"Supplier deleted id={supplier_id}")


@store_guard
def toggle_supplier_active(db: Session, supplier_id: int) -> Supplier:
    supplier = get_or_404(db, Supplier, supplier_id, ENTITY)

    supplier.active = not supplier.active
    commit_versioned(db, Supplier, supplier_id, ENTITY)
    db.refresh(supplier)

    state = "activated" if supplier.active else "deactivated"
    logger.info(f"Supplier {state} id={supplier.id}")
    return supplier


@store_guard
def suppliers_by_product_count(db: Session):
    """Active suppliers with their product counts, most products first.

    Ties keep the store's natural order.
    """
    product_count = func.count(Product.id).label("product_count")

    return (
        db.query(Supplier, product_count)
        .outerjoin(Product, Product.supplier_id == Supplier.id)
        .filter(Supplier.active.is_(True))
        .group_by(Supplier.id)
        .order_by(product_count.desc())
        .all()
    )


@store_guard
def contact_directory(db: Session):
    """Active suppliers that can be reached by email or phone."""
    reachable = or_(
        (Supplier.email.isnot(None)) & (Supplier.email != ""),
        (Supplier.phone.isnot(None)) & (Supplier.phone != ""),
    )

    return (
        db.query(Supplier)
        .filter(Supplier.active.is_(True), reachable)
        .order_by(Supplier.name)
        .all()
    )

# app/services/products.py

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.core.config import settings
from app.core.errors import FieldError, NotFound, ValidationFailed
from app.models.categories import Category
from app.models.products import Product
from app.models.suppliers import Supplier
from app.schemas.product import ProductCreate, ProductUpdate
from app.services.categories import list_categories
from app.services.common import (
    commit_new,
    commit_versioned,
    ensure_same_id,
    ensure_version,
    exists,
    store_guard,
    text_filter,
    validation_error,
)
from app.services.suppliers import list_suppliers

logger = logging.getLogger("app.services.products")

ENTITY = "Product"


def _with_relations(db: Session):
    return db.query(Product).options(
        joinedload(Product.category),
        joinedload(Product.supplier),
    )


def _validation_errors(db: Session, data: ProductCreate, exclude_id: int | None = None):
    errors = []

    query = db.query(Product.id).filter(Product.code == data.code)
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    if query.first():
        errors.append(FieldError("code", "A product with this code already exists"))

    if not exists(db, Category, data.category_id):
        errors.append(FieldError("category_id", "Category does not exist"))

    if not exists(db, Supplier, data.supplier_id):
        errors.append(FieldError("supplier_id", "Supplier does not exist"))

    return errors


def _apply(product: Product, data: ProductCreate):
    product.name = data.name
    product.description = data.description
    product.code = data.code
    product.price = data.price
    product.stock = data.stock
    product.category_id = data.category_id
    product.supplier_id = data.supplier_id


def _load(db: Session, product_id: int) -> Product:
    product = _with_relations(db).filter(Product.id == product_id).first()
    if product is None:
        raise NotFound(ENTITY, product_id)
    return product


@store_guard
def list_products(
    db: Session,
    q: str | None = None,
    category_id: int | None = None,
    supplier_id: int | None = None,
):
    query = text_filter(
        _with_relations(db),
        q,
        Product.name,
        Product.code,
        Product.description,
    )

    if category_id is not None:
        query = query.filter(Product.category_id == category_id)

    if supplier_id is not None:
        query = query.filter(Product.supplier_id == supplier_id)

    return query.order_by(Product.name).all()


@store_guard
def get_product(db: Session, product_id: int) -> Product:
    return _load(db, product_id)


@store_guard
def create_product(db: Session, data: ProductCreate) -> Product:
    errors = _validation_errors(db, data)
    if errors:
        raise ValidationFailed(errors)

    # updated_at stays NULL until the first edit
    product = Product()
    _apply(product, data)

    db.add(product)
    commit_new(db, explain=lambda: validation_error(_validation_errors(db, data)))

    logger.info(f"Product created id={product.id} code={product.code!r}")
    return _load(db, product.id)


@store_guard
def update_product(db: Session, product_id: int, data: ProductUpdate) -> Product:
    ensure_same_id(product_id, data.id)

    product = _load(db, product_id)
    ensure_version(product, data.version, ENTITY)

    errors = _validation_errors(db, data, exclude_id=product_id)
    if errors:
        raise ValidationFailed(errors)

    _apply(product, data)
    product.updated_at = func.now()

    commit_versioned(
        db,
        Product,
        product_id,
        ENTITY,
        explain=lambda: validation_error(_validation_errors(db, data, exclude_id=product_id)),
    )

    logger.info(f"Product updated id={product_id}")
    return _load(db, product_id)


@store_guard
def delete_product(db: Session, product_id: int) -> None:
    product = _load(db, product_id)

    db.delete(product)
    commit_versioned(db, Product, product_id, ENTITY)

    logger.info(f"Product deleted id={product_id}")


@store_guard
def low_stock_products(db: Session, threshold: int | None = None):
    if threshold is None:
        threshold = settings.LOW_STOCK_THRESHOLD

    return (
        _with_relations(db)
        .filter(Product.stock <= threshold)
        .order_by(Product.stock)
        .all()
    )


@store_guard
def product_form_options(db: Session):
    """Active categories and suppliers to choose from when editing a product."""
    return {
        "categories": list_categories(db, active_only=True),
        "suppliers": list_suppliers(db, active_only=True),
    }

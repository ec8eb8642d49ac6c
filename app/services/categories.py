# app/services/categories.py

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import DependentsExist, FieldError, ValidationFailed
from app.models.categories import Category
from app.models.products import Product
from app.schemas.category import CategoryCreate, CategoryUpdate
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

logger = logging.getLogger("app.services.categories")

ENTITY = "Category"


def _uniqueness_errors(db: Session, data: CategoryCreate, exclude_id: int | None = None):
    errors = []

    query = db.query(Category.id).filter(Category.name == data.name)
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)

    if query.first():
        errors.append(FieldError("name", "A category with this name already exists"))

    return errors


def _product_count(db: Session, category_id: int) -> int:
    return (
        db.query(func.count(Product.id))
        .filter(Product.category_id == category_id)
        .scalar()
    )


def _dependents_error(db: Session, category_id: int):
    count = _product_count(db, category_id)
    return DependentsExist(ENTITY, category_id, count) if count else None


@store_guard
def list_categories(db: Session, q: str | None = None, active_only: bool = True):
    query = text_filter(db.query(Category), q, Category.name, Category.description)

    if active_only:
        query = query.filter(Category.active.is_(True))

    return query.order_by(Category.name).all()


@store_guard
def get_category(db: Session, category_id: int):
    """Return the category and its products, ordered by product name."""
    category = get_or_404(db, Category, category_id, ENTITY)

    products = (
        db.query(Product)
        .filter(Product.category_id == category.id)
        .order_by(Product.name)
        .all()
    )

    return category, products


@store_guard
def create_category(db: Session, data: CategoryCreate) -> Category:
    errors = _uniqueness_errors(db, data)
    if errors:
        raise ValidationFailed(errors)

    category = Category(
        name=data.name,
        description=data.description,
        active=data.active,
    )

    db.add(category)
    commit_new(db, explain=lambda: validation_error(_uniqueness_errors(db, data)))
    db.refresh(category)

    logger.info(f"Category created id={category.id} name={category.name!r}")
    return category


@store_guard
def update_category(db: Session, category_id: int, data: CategoryUpdate) -> Category:
    ensure_same_id(category_id, data.id)

    category = get_or_404(db, Category, category_id, ENTITY)
    ensure_version(category, data.version, ENTITY)

    errors = _uniqueness_errors(db, data, exclude_id=category_id)
    if errors:
        raise ValidationFailed(errors)

    # created_at is fixed at creation and never rewritten
    category.name = data.name
    category.description = data.description
    category.active = data.active

    commit_versioned(
        db,
        Category,
        category_id,
        ENTITY,
        explain=lambda: validation_error(_uniqueness_errors(db, data, exclude_id=category_id)),
    )
    db.refresh(category)

    logger.info(f"Category updated id={category.id}")
    return category


@store_guard
def delete_category(db: Session, category_id: int) -> None:
    category = get_or_404(db, Category, category_id, ENTITY)

    dependents = _dependents_error(db, category_id)
    if dependents:
        raise dependents

    db.delete(category)
    commit_versioned(
        db,
        Category,
        category_id,
        ENTITY,
        explain=lambda: _dependents_error(db, category_id),
    )

    logger.info(f"Category deleted id={category_id}")


@store_guard
def toggle_category_active(db: Session, category_id: int) -> Category:
    category = get_or_404(db, Category, category_id, ENTITY)

    category.active = not category.active
    commit_versioned(db, Category, category_id, ENTITY)
    db.refresh(category)

    state = "activated" if category.active else "deactivated"
    logger.info(f"Category {state} id={category.id}")
    return category


@store_guard
def categories_by_product_count(db: Session):
    """Active categories with their product counts, most products first.

    Categories with equal counts come back in whatever order the store
    returns them.
    """
    product_count = func.count(Product.id).label("product_count")

    return (
        db.query(Category, product_count)
        .outerjoin(Product, Product.category_id == Category.id)
        .filter(Category.active.is_(True))
        .group_by(Category.id)
        .order_by(product_count.desc())
        .all()
    )


"""
Pytest configuration and shared fixtures for the inventory API tests.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.schemas.category import CategoryCreate
from app.schemas.product import ProductCreate
from app.schemas.supplier import SupplierCreate
from app.services.categories import create_category
from app.services.products import create_product
from app.services.suppliers import create_supplier


@pytest.fixture
def engine():
    """A fresh in-memory database per test; StaticPool keeps one connection alive."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    """A test client whose requests use the per-test database."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def category(db):
    return create_category(db, CategoryCreate(name="Beverages", description="Drinks"))


@pytest.fixture
def supplier(db):
    return create_supplier(db, SupplierCreate(name="Acme", email="a@x.com"))


@pytest.fixture
def make_product(db, category, supplier):
    """Factory for products attached to the default category and supplier."""

    def _make(code, stock=100, name=None, **overrides):
        fields = {
            "name": name or f"Product {code}",
            "code": code,
            "price": Decimal("1.50"),
            "stock": stock,
            "category_id": category.id,
            "supplier_id": supplier.id,
        }
        fields.update(overrides)
        return create_product(db, ProductCreate(**fields))

    return _make

"""
Optimistic-concurrency and store-failure handling.

These tests use a file-backed SQLite database so that two sessions get two
real connections and can interleave like two users editing the same row.
"""
import pytest
from decimal import Decimal
from sqlalchemy import create_engine, event
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from app.core.errors import ConcurrencyConflict, Gone, StoreUnavailable
from app.database import Base
from app.models.categories import Category
from app.models.products import Product
from app.schemas.category import CategoryCreate, CategoryUpdate
from app.schemas.product import ProductCreate, ProductUpdate
from app.schemas.supplier import SupplierCreate
from app.services.categories import create_category, update_category
from app.services.products import create_product, update_product
from app.services.suppliers import create_supplier
from app.services.common import commit_versioned, store_guard


@pytest.fixture
def two_sessions(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'inventory.db'}")
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autoflush=False, bind=engine)

    first, second = Session(), Session()
    yield first, second

    first.close()
    second.close()
    engine.dispose()


def test_concurrent_edit_is_reported_as_conflict(two_sessions):
    first, second = two_sessions
    category_id = create_category(first, CategoryCreate(name="Tools")).id

    mine = first.get(Category, category_id)
    theirs = second.get(Category, category_id)

    theirs.description = "edited elsewhere"
    second.commit()

    mine.description = "my edit"
    with pytest.raises(ConcurrencyConflict):
        commit_versioned(first, Category, category_id, "Category")

    first.expire_all()
    assert first.get(Category, category_id).description == "edited elsewhere"


def test_edit_of_removed_row_is_reported_as_gone(two_sessions):
    first, second = two_sessions
    category_id = create_category(first, CategoryCreate(name="Tools")).id

    mine = first.get(Category, category_id)
    second.delete(second.get(Category, category_id))
    second.commit()

    mine.description = "too late"
    with pytest.raises(Gone):
        commit_versioned(first, Category, category_id, "Category")



def _on_next_commit(session, action):
    # Runs `action` after the service has read the row but before it writes
    event.listen(session, "before_commit", lambda _session: action(), once=True)


def test_update_product_removed_meanwhile_is_gone(two_sessions):
    first, second = two_sessions
    category = create_category(first, CategoryCreate(name="Beverages"))
    supplier = create_supplier(first, SupplierCreate(name="Acme"))
    product = create_product(
        first,
        ProductCreate(
            name="Cola",
            code="C-001",
            price=Decimal("1.50"),
            stock=100,
            category_id=category.id,
            supplier_id=supplier.id,
        ),
    )
    product_id = product.id

    def delete_elsewhere():
        second.delete(second.get(Product, product_id))
        second.commit()

    _on_next_commit(first, delete_elsewhere)

    payload = ProductUpdate(
        id=product_id,
        name="Cola",
        code="C-001",
        price=Decimal("1.50"),
        stock=50,
        category_id=category.id,
        supplier_id=supplier.id,
    )
    with pytest.raises(Gone):
        update_product(first, product_id, payload)

    assert second.get(Product, product_id) is None


def test_update_category_changed_meanwhile_is_conflict(two_sessions):
    first, second = two_sessions
    category_id = create_category(first, CategoryCreate(name="Tools")).id

    def edit_elsewhere():
        second.get(Category, category_id).description = "edited elsewhere"
        second.commit()

    _on_next_commit(first, edit_elsewhere)

    with pytest.raises(ConcurrencyConflict):
        update_category(
            first,
            category_id,
            CategoryUpdate(id=category_id, name="Tools", description="my edit"),
        )

    first.expire_all()
    assert first.get(Category, category_id).description == "edited elsewhere"

def test_store_guard_reports_unavailable_store(db):
    @store_guard
    def lost_connection(session):
        raise OperationalError("SELECT 1", {}, Exception("server closed the connection"))

    with pytest.raises(StoreUnavailable) as exc_info:
        lost_connection(db)

    assert isinstance(exc_info.value.cause, OperationalError)

import os
import tempfile

# Point the application at a throwaway database before anything imports config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="erp-test-logs-")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")


import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
import models  # noqa: F401
from crud.chart_of_accounts import initialize_default_accounts
from crud.customers import create_customer
from crud.products import create_product
from crud.sequences import ensure_sequences
from crud.suppliers import create_supplier
from crud.warehouses import create_warehouse
from schemas.customers import CustomerCreate
from schemas.products import ProductCreate
from schemas.suppliers import SupplierCreate
from schemas.warehouses import WarehouseCreate

TEST_USER = {"sub": "tester", "role": "ADMIN"}


@pytest.fixture
def engine():
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
    initialize_default_accounts(session)
    ensure_sequences(session)
    yield session
    session.close()


@pytest.fixture
def warehouse(db):
    return create_warehouse(db, WarehouseCreate(name="Main Warehouse", location="Head office"), "tester")


@pytest.fixture
def second_warehouse(db):
    return create_warehouse(db, WarehouseCreate(name="Branch Warehouse", location="Branch"), "tester")


@pytest.fixture
def customer(db):
    return create_customer(db, CustomerCreate(name="Acme Retail", email="buyer@acme.example"), "tester")


@pytest.fixture
def supplier(db):
    return create_supplier(db, SupplierCreate(name="Global Parts Ltd"), "tester")


@pytest.fixture
def product_a(db):
    return create_product(db, ProductCreate(
        sku="SKU-A", name="Widget", cost_price="6.00", selling_price="10.00", reorder_level=10
    ), "tester")


@pytest.fixture
def product_b(db):
    return create_product(db, ProductCreate(
        sku="SKU-B", name="Gadget", cost_price="15.00", selling_price="25.00", reorder_level=5
    ), "tester")


@pytest.fixture
def client(db, session_factory):
    from main import app
    from utils.auth_utils import get_current_user

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: TEST_USER
    yield TestClient(app)
    app.dependency_overrides.clear()



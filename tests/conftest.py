import os

# Point the application at SQLite before any shopease module reads settings
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shopease.main import app
from shopease.database import Base, build_engine, get_db
from shopease.models.customer import Customer
from shopease.services.product_service import ProductService


# Create test database (SQLite in-memory for testing)
SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = build_engine(SQLALCHEMY_DATABASE_URL, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependency
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function")
def client():
    """Create test client with fresh database for each test."""
    Base.metadata.create_all(bind=engine)

    with TestClient(app) as test_client:
        yield test_client

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create database session for direct database access in tests."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def customer_id(db_session):
    """Insert a customer (sales need one to reference) and return its ID."""
    customer = Customer(first_name="Ada", last_name="Lovelace", email="ada@example.com")
    db_session.add(customer)
    db_session.flush()
    new_id = customer.customer_id
    db_session.commit()
    return new_id


@pytest.fixture
def make_product(db_session):
    """Factory creating products through the service."""
    def _make(**overrides):
        fields = {
            "product_name": "Laptop",
            "price": 1200.00,
            "category": "Electronics",
            "stock_quantity": 10,
        }
        fields.update(overrides)
        return ProductService(db_session).create_product(fields)

    return _make

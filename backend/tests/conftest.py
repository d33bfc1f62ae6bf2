"""
Pytest fixtures and configuration for Bazar backend tests

Tests run against an in-memory SQLite database; the schema is created
fresh for every test.
"""
import os

# Settings are read at import time, so the environment must be ready first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-do-not-use-in-production")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from bazar.core.auth import TokenService  # noqa: E402
from bazar.core.database import Base, SessionLocal, engine, get_db, init_db  # noqa: E402
from bazar.main import app  # noqa: E402
from bazar.models import Product  # noqa: E402
from bazar.services.auth_service import AuthService  # noqa: E402


@pytest.fixture(scope="function")
def database():
    """
    Provides a freshly created schema for each test

    Scope: function (tables dropped after the test)
    """
    init_db(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(database):
    """
    Provides a SQLAlchemy session for each test

    Automatically closed after the test
    """
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def token_service():
    return TokenService(secret="unit-test-secret", expires_minutes=30)


@pytest.fixture
def sample_products(db_session):
    """
    Seeds the catalog used by the order scenarios:
    product 1 has stock 5, product 2 has stock 1, product 3 is inactive
    """
    products = [
        Product(id=1, name="Taza de cerámica", price=Decimal("8.50"), stock=5),
        Product(id=2, name="Vela aromática", price=Decimal("12.00"), stock=1),
        Product(id=3, name="Lámpara retirada", price=Decimal("30.00"), stock=10, is_active=False),
        Product(id=4, name="Cuaderno reciclado", price=Decimal("4.75"), stock=40),
    ]
    db_session.add_all(products)
    db_session.commit()
    return products


@pytest.fixture
def sample_user_data():
    """
    Provides sample registration data for tests
    """
    return {
        "name": "Ana",
        "email": "ana@x.com",
        "password": "s3cret1",
    }


@pytest.fixture
def registered_user(db_session, token_service, sample_user_data):
    """Registers Ana through the auth service; returns (token, user)"""
    service = AuthService(db_session, token_service)
    return service.register(**sample_user_data)


@pytest.fixture
def client(database):
    """
    TestClient with get_db bound to the test database

    Each request gets its own session, as in production.
    """
    def override_get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client, sample_user_data):
    """Registers Ana through the API and returns her Authorization header"""
    response = client.post("/auth/register", json=sample_user_data)
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}

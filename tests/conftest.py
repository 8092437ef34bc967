# 1. Standard Library
from collections.abc import Generator
from typing import Any

import pytest

# 2. Third-Party Libraries
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# 3. Application Layers
from bikeshop.api.main import app
from bikeshop.data_access.database import enable_sqlite_foreign_keys, get_session
from bikeshop.data_access.repositories import StoreRepositories


# --- Setup: Isolated Testing Environment ---

@pytest.fixture(name="session")
def session_fixture() -> Generator[Session, Any, None]:
    """
    Creates a clean, in-memory SQLite database for every test.
    StaticPool keeps the single in-memory connection alive across the
    TestClient's worker thread. Foreign keys are enforced as in the app.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session) -> Generator[TestClient, Any, None]:
    """TestClient whose requests use the in-memory session."""
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(name="store")
def store_fixture(client: TestClient) -> StoreRepositories:
    """Repositories talking to the in-process API (TestClient is an httpx.Client)."""
    return StoreRepositories(TestClient(app, base_url="http://testserver/api"))


# --- Payloads (wire format) ---

@pytest.fixture
def customer_payload() -> dict[str, Any]:
    return {
        "firstName": "John",
        "lastName": "Doe",
        "address": "123 Main St",
        "phone": "123-456-7890",
        "startDate": "2024-05-20",
    }


@pytest.fixture
def product_payload() -> dict[str, Any]:
    return {
        "name": "Allez Sport",
        "manufacturer": "Specialized",
        "style": "Road",
        "purchasePrice": 150.0,
        "salePrice": 200.0,
        "qtyOnHand": 5,
        "commissionPercentage": 10.0,
    }


@pytest.fixture
def salesperson_payload() -> dict[str, Any]:
    return {
        "firstName": "Jane",
        "lastName": "Smith",
        "address": "456 Oak St",
        "phone": "987-654-3210",
        "startDate": "2024-01-15",
        "terminationDate": None,
        "manager": "Michael Scott",
    }

from datetime import date
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from bikeshop.data_access.repositories import FetchError, MutationError, StoreRepositories
from bikeshop.domain import CustomerDomain, ProductDomain


def mock_store(handler: Any) -> StoreRepositories:
    client = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://store.test/api")
    return StoreRepositories(client)


# --- 1. Caching ---

def test_collection_is_cached_until_refetch(
    store: StoreRepositories,
    client: TestClient,
    customer_payload: dict[str, Any],
) -> None:
    assert store.customers.get_all() == []
    assert store.customers.is_cached

    # written behind the repository's back
    client.post("/api/customers", json=customer_payload)

    assert store.customers.get_all() == []
    refreshed = store.customers.refetch()
    assert [c.first_name for c in refreshed] == ["John"]
    assert store.customers.get_all() == refreshed


def test_create_invalidates_cache(store: StoreRepositories, product_payload: dict[str, Any]) -> None:
    store.products.get_all()

    created = store.products.create(ProductDomain.model_validate(product_payload))

    assert created.id is not None
    assert not store.products.is_cached
    assert [p.id for p in store.products.get_all()] == [created.id]


def test_update_and_delete(store: StoreRepositories, customer_payload: dict[str, Any]) -> None:
    created = store.customers.create(CustomerDomain.model_validate(customer_payload))
    store.customers.get_all()

    updated = store.customers.update(created.id, created.model_copy(update={"address": "9 Pine Rd"}))
    assert updated.address == "9 Pine Rd"
    assert not store.customers.is_cached

    assert store.customers.get(created.id).address == "9 Pine Rd"

    store.customers.delete(created.id)
    assert store.customers.get_all() == []


def test_invalidate_all(store: StoreRepositories) -> None:
    store.customers.get_all()
    store.sales.get_all()

    store.invalidate_all()

    assert not store.customers.is_cached
    assert not store.sales.is_cached


def test_sales_are_create_and_read_only(store: StoreRepositories) -> None:
    assert not hasattr(store.sales, "update")
    assert not hasattr(store.sales, "delete")
    assert hasattr(store.salespersons, "update")


# --- 2. Failures ---

def test_rejected_create_keeps_cache(store: StoreRepositories, customer_payload: dict[str, Any]) -> None:
    store.customers.get_all()
    invalid = CustomerDomain.model_validate({**customer_payload, "lastName": ""})

    with pytest.raises(MutationError) as exc_info:
        store.customers.create(invalid)

    assert exc_info.value.status_code == 422
    assert exc_info.value.detail["errors"] == {"lastName": "Last name is required"}
    assert store.customers.is_cached


def test_missing_record(store: StoreRepositories) -> None:
    with pytest.raises(FetchError) as exc_info:
        store.products.get(404)
    assert exc_info.value.status_code == 404


def test_server_error_is_a_fetch_error() -> None:
    store = mock_store(lambda request: httpx.Response(500, json={"detail": "boom"}))

    with pytest.raises(FetchError) as exc_info:
        store.sales.get_all()

    assert exc_info.value.message == "Failed to fetch sales"
    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "boom"
    assert not store.sales.is_cached


def test_malformed_payload_is_a_fetch_error() -> None:
    store = mock_store(lambda request: httpx.Response(200, json={"unexpected": "shape"}))

    with pytest.raises(FetchError):
        store.salespersons.get_all()

    assert not store.salespersons.is_cached


def test_transport_failure_is_a_fetch_error() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    store = mock_store(refuse)

    with pytest.raises(FetchError) as exc_info:
        store.customers.get_all()

    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_payload_is_camel_case_without_id() -> None:
    seen: list[dict[str, Any]] = []

    def capture(request: httpx.Request) -> httpx.Response:
        body = httpx.Response(200, content=request.content).json()
        seen.append(body)
        return httpx.Response(201, json={**body, "id": 5})

    store = mock_store(capture)
    draft = CustomerDomain(
        id=99,
        first_name="John",
        last_name="Doe",
        address="123 Main St",
        phone="123-456-7890",
        start_date=date(2024, 5, 20),
    )

    created = store.customers.create(draft)

    assert seen == [{
        "firstName": "John",
        "lastName": "Doe",
        "address": "123 Main St",
        "phone": "123-456-7890",
        "startDate": "2024-05-20",
    }]
    assert created.id == 5

from datetime import date
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from bikeshop.data_access.repositories import StoreRepositories
from bikeshop.domain import PeriodSelector, ReportingPeriod, SaleDomain
from bikeshop.services import report_view_service
from bikeshop.services.report_view_service import CommissionReportView


TODAY = date(2024, 11, 5)


@pytest.fixture
def seeded(
    client: TestClient,
    customer_payload: dict[str, Any],
    product_payload: dict[str, Any],
    salesperson_payload: dict[str, Any],
) -> dict[str, int]:
    ids = {
        "customer": client.post("/api/customers", json=customer_payload).json()["id"],
        "product": client.post("/api/products", json=product_payload).json()["id"],
        "salesperson": client.post("/api/salespersons", json=salesperson_payload).json()["id"],
    }
    client.post("/api/sales", json={
        "productId": ids["product"],
        "salesPersonId": ids["salesperson"],
        "customerId": ids["customer"],
        "date": "2024-10-15",
    })
    return ids


@pytest.fixture
def view(store: StoreRepositories) -> CommissionReportView:
    return CommissionReportView(store, PeriodSelector(clock=lambda: TODAY))


def test_render_current_quarter(view: CommissionReportView, seeded: dict[str, int]) -> None:
    state = view.render()

    assert state.applied_period == ReportingPeriod(year=2024, quarter=4)
    assert state.available_years == [2022, 2023, 2024]
    assert not state.can_apply
    assert not state.can_clear
    assert state.error is None
    assert state.empty_message is None
    assert [(r.salesperson_name, r.total_commission) for r in state.rows] == [("Jane Smith", 20.0)]


def test_pending_selection_does_not_change_report(view: CommissionReportView, seeded: dict[str, int]) -> None:
    view.select_period(quarter=3)
    state = view.render()

    assert state.can_apply
    assert state.pending_period.quarter == 3
    assert state.applied_period.quarter == 4
    assert len(state.rows) == 1


def test_apply_and_clear(view: CommissionReportView, seeded: dict[str, int]) -> None:
    view.select_period(quarter=3)
    view.apply_period()
    state = view.render()

    assert state.rows == []
    assert state.empty_message == "No commission reports found for Q3 2024."
    assert not state.can_apply
    assert state.can_clear

    view.clear_period()
    state = view.render()

    assert state.applied_period == ReportingPeriod(year=2024, quarter=4)
    assert not state.can_clear
    assert len(state.rows) == 1


def test_new_sale_is_reflected(view: CommissionReportView, store: StoreRepositories, seeded: dict[str, int]) -> None:
    assert view.render().rows[0].number_of_sales == 1

    store.sales.create(SaleDomain(
        product_id=seeded["product"],
        sales_person_id=seeded["salesperson"],
        customer_id=seeded["customer"],
        sale_date=date(2024, 11, 1),
    ))

    row = view.render().rows[0]
    assert row.number_of_sales == 2
    assert row.total_commission == 40.0


def test_details(view: CommissionReportView, seeded: dict[str, int]) -> None:
    view.load()

    detail = view.details(seeded["salesperson"])

    assert detail is not None
    assert detail.title == "Quarterly Commission Details for Jane Smith"
    assert view.details(999) is None


def test_fetch_failure_shows_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(*args: Any) -> Any:
        raise AssertionError("aggregated without data")

    monkeypatch.setattr(report_view_service, "aggregate", fail)
    client = httpx.Client(
        transport=httpx.MockTransport(lambda request: httpx.Response(503)),
        base_url="http://store.test/api",
    )
    view = CommissionReportView(StoreRepositories(client), PeriodSelector(clock=lambda: TODAY))

    state = view.render()

    assert state.error == "Failed to fetch salespersons"
    assert state.rows == []
    assert state.empty_message is None
    assert not view.is_loaded


def test_failed_load_can_be_retried() -> None:
    calls = {"/api/salespersons": 0, "/api/sales": 0}
    salespersons = [{"id": 1, "firstName": "Jane", "lastName": "Smith", "phone": "987-654-3210"}]
    sales = [{
        "id": 1,
        "productId": 1,
        "salesPersonId": 1,
        "customerId": 1,
        "date": "2024-10-15",
        "product": {"id": 1, "name": "Allez Sport", "salePrice": 200.0, "commissionPercentage": 10.0},
    }]

    def flaky_sales(request: httpx.Request) -> httpx.Response:
        calls[request.url.path] += 1
        if request.url.path == "/api/salespersons":
            return httpx.Response(200, json=salespersons)
        if calls["/api/sales"] == 1:
            return httpx.Response(503)
        return httpx.Response(200, json=sales)

    client = httpx.Client(transport=httpx.MockTransport(flaky_sales), base_url="http://store.test/api")
    view = CommissionReportView(StoreRepositories(client), PeriodSelector(clock=lambda: TODAY))

    failed = view.render()
    assert failed.error == "Failed to fetch sales"
    assert failed.rows == []
    assert calls["/api/sales"] == 1

    retried = view.render()
    assert retried.error is None
    assert [(r.salesperson_name, r.total_commission) for r in retried.rows] == [("Jane Smith", 20.0)]
    assert calls == {"/api/salespersons": 1, "/api/sales": 2}


def test_closed_view_renders_no_empty_state(view: CommissionReportView, seeded: dict[str, int]) -> None:
    view.close()

    state = view.render()

    assert state.rows == []
    assert state.error is None
    assert state.empty_message is None


def test_close_discards_in_flight_load() -> None:
    view: CommissionReportView | None = None

    def respond(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/sales"):
            view.close()
        return httpx.Response(200, json=[])

    client = httpx.Client(transport=httpx.MockTransport(respond), base_url="http://store.test/api")
    view = CommissionReportView(StoreRepositories(client), PeriodSelector(clock=lambda: TODAY))

    assert not view.load()
    assert not view.is_loaded
    assert view.is_closed
    assert view.error is None
    assert not view.load()

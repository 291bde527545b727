"""HTTP tests for search, listing orders and host availability."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from stayhub.api.auth import get_current_caller
from stayhub.api.factory import create_app

from .helpers import host, renter

SEARCH_PARAMS = {
    "type": "STAY",
    "start_date": "2024-06-01",
    "end_date": "2024-06-03",
    "min_price": "50",
    "max_price": "150",
}


@pytest.fixture
def app(services):
    return create_app(services=services)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def login(app):
    def _login(caller):
        app.dependency_overrides[get_current_caller] = lambda: caller

    return _login


class TestSearch:
    def test_search_is_public(self, client):
        response = client.get("/listings/search", params=SEARCH_PARAMS)

        assert response.status_code == 200
        items = response.json()["items"]
        assert [i["listing_id"] for i in items] == ["STAY#beach", "STAY#loft"]
        assert items[0]["city"] == "Lisbon"
        assert Decimal(str(items[0]["average_price"])) == Decimal("100.00")
        assert Decimal(str(items[1]["average_price"])) == Decimal("80.00")

    def test_booked_days_drop_out(self, client, login):
        login(renter("user-1"))
        client.post(
            "/orders",
            json={
                "user_id": "user-1",
                "listing_id": "STAY#loft",
                "start_date": "2024-06-01",
                "end_date": "2024-06-03",
            },
        )
        items = client.get("/listings/search", params=SEARCH_PARAMS).json()["items"]
        assert [i["listing_id"] for i in items] == ["STAY#beach"]

    def test_no_matches(self, client):
        params = {**SEARCH_PARAMS, "min_price": "500", "max_price": "600"}
        assert client.get("/listings/search", params=params).json() == {"items": []}

    @pytest.mark.parametrize(
        "overrides",
        [
            {"type": "HOME"},
            {"min_price": "-1"},
            {"min_price": "100", "max_price": "50"},
            {"start_date": "2024-06-05"},
        ],
    )
    def test_invalid_params_are_400(self, client, overrides):
        response = client.get("/listings/search", params={**SEARCH_PARAMS, **overrides})
        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_input"


class TestListingOrders:
    def test_host_sees_listing_orders(self, client, login):
        login(renter("user-1"))
        client.post(
            "/orders",
            json={
                "user_id": "user-1",
                "listing_id": "STAY#beach",
                "start_date": "2024-06-01",
                "end_date": "2024-06-02",
            },
        )

        login(renter("host-1"))
        response = client.get("/listings/STAY%23beach/orders")
        assert response.status_code == 200
        assert [o["user_id"] for o in response.json()] == ["user-1"]

    def test_non_host_forbidden(self, client, login):
        login(renter("user-1"))
        assert client.get("/listings/STAY%23beach/orders").status_code == 403


class TestAvailability:
    def test_host_sets_and_reads_day(self, client, login):
        login(host("host-1"))
        response = client.put(
            "/listings/STAY%23beach/availability",
            json={"date": "2024-07-01", "is_available": True, "price": "125.50"},
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Availability updated successfully"
        assert response.json()["availability"]["date"] == "2024-07-01"

        response = client.get(
            "/listings/STAY%23beach/availability",
            params={"start_date": "2024-07-01", "end_date": "2024-07-02"},
        )
        assert response.status_code == 200
        days = response.json()
        assert len(days) == 1
        assert Decimal(str(days[0]["price"])) == Decimal("125.50")

    def test_non_host_group_forbidden(self, client, login):
        login(renter("host-1"))
        response = client.put(
            "/listings/STAY%23beach/availability",
            json={"date": "2024-07-01", "is_available": True, "price": "10"},
        )
        assert response.status_code == 403

    def test_negative_price_is_400(self, client, login):
        login(host("host-1"))
        response = client.put(
            "/listings/STAY%23beach/availability",
            json={"date": "2024-07-01", "is_available": True, "price": "-5"},
        )
        assert response.status_code == 400

    def test_reopening_booked_day_is_409(self, client, login):
        login(renter("user-1"))
        client.post(
            "/orders",
            json={
                "user_id": "user-1",
                "listing_id": "STAY#beach",
                "start_date": "2024-06-01",
                "end_date": "2024-06-03",
            },
        )

        login(host("host-1"))
        response = client.put(
            "/listings/STAY%23beach/availability",
            json={"date": "2024-06-02", "is_available": True, "price": "100"},
        )
        assert response.status_code == 409
        assert response.json()["kind"] == "unavailable"

import pytest
from fastapi.testclient import TestClient
from marketplace.api.application import build_app
from marketplace.domain import marketplace


@pytest.fixture()
def client():
    return TestClient(build_app(marketplace))


@pytest.fixture()
def api_product_id(client):
    response = client.post(
        "/products",
        json={"name": "Wax fabric", "price": 10000, "capital": 6000, "stock": 20, "supplier_id": "sup-001"},
    )
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture()
def create_order(client, api_product_id):
    """POST /orders and return the response body."""

    def _create(customer=None, **extra):
        payload = {
            "customer": customer
            or {
                "full_name": "Awa Kone",
                "phone": "0700000001",
                "city": "Abidjan",
                "commune": "Cocody",
            },
            "items": [{"product_id": api_product_id, "quantity": 1}],
            **extra,
        }
        response = client.post("/orders", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture()
def deliver(client):
    def _deliver(order_id):
        for status in ("Processing", "In_Transit", "Out_For_Delivery", "Delivered"):
            response = client.put(f"/orders/{order_id}/status", json={"status": status})
            assert response.status_code == 200, response.text

    return _deliver

# path: tests/test_api.py
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from school_inventory.main import create_app
from school_inventory.stock.api.api_v1.deps import get_inventory_gateway, get_inventory_service
from school_inventory.stock.services.inventory_service import InventoryService
from tests.conftest import TODAY

API = "/api/v1"

DRILL = {"name": "Taladro", "category": "HERRAMIENTA", "type": "tool", "quantity": 2, "location": "TALLER"}


@pytest.fixture
def client(gateway):
    app = create_app()
    app.dependency_overrides[get_inventory_gateway] = lambda: gateway
    app.dependency_overrides[get_inventory_service] = lambda: InventoryService(gateway, today=lambda: TODAY)
    return TestClient(app)


def test_create_and_list_items(client):
    res = client.post(f"{API}/items", json=DRILL)
    assert res.status_code == 201
    body = res.json()
    assert body["available_quantity"] == 2
    assert body["status"] == "active"

    res = client.get(f"{API}/items")
    assert [i["name"] for i in res.json()] == ["Taladro"]


def test_missing_item_is_404(client):
    res = client.get(f"{API}/items/nope")
    assert res.status_code == 404


def test_validation_error_is_422_with_field(client):
    item_id = client.post(f"{API}/items", json=DRILL).json()["id"]

    res = client.post(f"{API}/transactions", json={"item_id": item_id, "quantity": 3, "teacher_name": "Ana"})

    assert res.status_code == 422
    assert res.json()["field"] == "quantity"


def test_store_failure_is_503(client, gateway):
    gateway.fail_on.add("list_items")

    res = client.get(f"{API}/items")

    assert res.status_code == 503


def test_degraded_edit(client, gateway):
    item_id = client.post(f"{API}/items", json=DRILL).json()["id"]
    gateway.fail_on.add("update_item")

    res = client.patch(f"{API}/items/{item_id}", json={"name": "Taladro viejo"})

    assert res.status_code == 200
    body = res.json()
    assert body["persisted"] is False
    assert body["item"]["name"] == "Taladro viejo"
    assert gateway.items[item_id].name == "Taladro"


def test_loan_return_and_extend(client):
    item_id = client.post(f"{API}/items", json=DRILL).json()["id"]

    res = client.post(f"{API}/transactions", json={"item_id": item_id, "quantity": 1, "teacher_name": "Ana"})
    assert res.status_code == 201
    tx = res.json()
    assert tx["return_date"] == "2026-03-17"

    res = client.post(f"{API}/transactions/{tx['id']}/extend", json={"return_date": "2026-03-24"})
    assert res.json()["return_date"] == "2026-03-24"

    res = client.post(f"{API}/transactions/{tx['id']}/return")
    assert res.json()["status"] == "returned"

    assert client.get(f"{API}/items/{item_id}").json()["available_quantity"] == 2


def test_batch_loans(client):
    item_id = client.post(f"{API}/items", json=DRILL).json()["id"]

    res = client.post(
        f"{API}/transactions/batch",
        json={"teacher_name": "Marta", "lines": [{"item_id": item_id, "quantity": 1}, {"item_id": item_id}]},
    )

    assert res.status_code == 201
    assert len(res.json()) == 2


def test_disposal_flow(client, gateway):
    item_id = client.post(f"{API}/items", json={**DRILL, "quantity": 10}).json()["id"]

    res = client.post(f"{API}/disposals", json={"item_id": item_id, "quantity": 3, "status": "pending"})
    disposal_id = res.json()["id"]
    assert gateway.items[item_id].quantity == 10

    res = client.post(f"{API}/disposals/{disposal_id}/approve")
    assert res.json()["status"] == "approved"
    assert gateway.items[item_id].quantity == 7

    res = client.post(f"{API}/disposals/{disposal_id}/reject")
    assert res.status_code == 422


def test_settings_lists(client):
    res = client.get(f"{API}/settings")
    assert res.json()["default_loan_days"] == 7

    res = client.post(f"{API}/settings/lists/teachers", json={"name": "Ana"})
    assert res.json() == ["SIN ASIGNAR", "Ana"]

    res = client.delete(f"{API}/settings/lists/teachers/Ana")
    assert res.json() == ["SIN ASIGNAR"]

    res = client.delete(f"{API}/settings/lists/teachers/SIN ASIGNAR")
    assert res.status_code == 422


def test_dashboard(client):
    client.post(f"{API}/items", json=DRILL)

    res = client.get(f"{API}/reports/dashboard")

    assert res.status_code == 200
    assert res.json()["total_units"] == 2

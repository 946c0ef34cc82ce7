# dental_core/inventory/tests/test_inventory_api.py
import pytest

from dental_core.conftest import client_for

pytestmark = pytest.mark.django_db


def test_create_and_list_items(api_client):
    res = api_client.post(
        "/api/v1/inventory/items/",
        {"name": "Composite resin", "quantity": 4, "reorder_threshold": 5},
        format="json",
    )
    assert res.status_code == 201, res.data
    assert res.data["is_low_stock"] is True

    listed = api_client.get("/api/v1/inventory/items/")
    assert listed.status_code == 200, listed.data
    assert listed.data["count"] == 1
    assert listed.data["results"][0]["name"] == "Composite resin"


def test_list_filters_low_stock(api_client, make_item):
    make_item(name="Plenty", quantity=50, reorder_threshold=5)
    make_item(name="Scarce", quantity=1, reorder_threshold=5)

    res = api_client.get("/api/v1/inventory/items/?low_stock=true")
    assert res.status_code == 200, res.data
    assert [r["name"] for r in res.data["results"]] == ["Scarce"]

    low = api_client.get("/api/v1/inventory/items/low-stock/")
    assert low.status_code == 200
    assert [r["name"] for r in low.data] == ["Scarce"]


def test_adjust_endpoint(inventory_manager, item):
    c = client_for(inventory_manager)
    res = c.post(f"/api/v1/inventory/items/{item.id}/adjust/", {"delta": 5, "reason": "Delivery"}, format="json")
    assert res.status_code == 200, res.data
    assert res.data["quantity"] == 15

    txns = c.get(f"/api/v1/inventory/items/{item.id}/transactions/")
    assert txns.status_code == 200
    assert txns.data["results"][0]["kind"] == "ADJUSTED"


def test_adjust_negative_result_returns_400_envelope(inventory_manager, item):
    res = client_for(inventory_manager).post(
        f"/api/v1/inventory/items/{item.id}/adjust/",
        {"delta": -100, "reason": "Recount"},
        format="json",
    )
    assert res.status_code == 400
    assert res.data["error"]["code"] == "invalid_quantity"
    assert res.data["error"]["request_id"]


def test_nurse_cannot_adjust(nurse, item):
    res = client_for(nurse).post(
        f"/api/v1/inventory/items/{item.id}/adjust/",
        {"delta": 1, "reason": "x"},
        format="json",
    )
    assert res.status_code == 403
    assert res.data["error"]["code"] == "forbidden"


def test_other_tenant_item_looks_missing(other_doctor, item):
    res = client_for(other_doctor).get(f"/api/v1/inventory/items/{item.id}/")
    assert res.status_code == 404
    assert res.data["error"]["code"] == "not_found"


def test_transactions_are_cursor_paginated(inventory_manager, item):
    c = client_for(inventory_manager)
    for delta in (1, 2, 3):
        c.post(f"/api/v1/inventory/items/{item.id}/adjust/", {"delta": delta, "reason": "Count"}, format="json")

    first = c.get(f"/api/v1/inventory/items/{item.id}/transactions/?page_size=2")
    assert first.status_code == 200, first.data
    assert "count" not in first.data
    assert [r["quantity_delta"] for r in first.data["results"]] == [3, 2]

    rest = c.get(first.data["next"])
    assert [r["quantity_delta"] for r in rest.data["results"]] == [1]

# dental_core/tests/test_error_envelope.py
import json

import pytest
from django.db import OperationalError
from django.http import HttpResponse
from django.test import RequestFactory
from rest_framework.test import APIRequestFactory

from dental_core.common.api.exceptions import StockInsufficient, api_exception_handler
from dental_core.common.middleware import RequestIdMiddleware


@pytest.mark.django_db
def test_envelope_echoes_inbound_request_id(doctor_client):
    res = doctor_client.get("/api/v1/patients/not-a-uuid/", HTTP_X_REQUEST_ID="req-12345678")

    assert res.status_code == 404
    assert res["X-Request-Id"] == "req-12345678"
    assert res.data["error"]["request_id"] == "req-12345678"
    assert set(res.data["error"]) == {"code", "message", "details", "request_id"}


@pytest.mark.django_db
def test_unsafe_inbound_request_id_is_replaced(doctor_client):
    res = doctor_client.get("/api/v1/patients/", HTTP_X_REQUEST_ID="bad id;drop")

    assert res.status_code == 200
    assert res["X-Request-Id"] != "bad id;drop"
    assert len(res["X-Request-Id"]) == 32


def test_middleware_stamps_request_and_response():
    req = RequestFactory().get("/api/v1/me/")
    mw = RequestIdMiddleware(get_response=lambda r: None)

    assert mw.process_request(req) is None
    assert req.request_id

    resp = mw.process_response(req, HttpResponse("ok"))
    assert resp["X-Request-Id"] == req.request_id


def test_database_failure_maps_to_transient():
    request = APIRequestFactory().get("/api/v1/inventory/items/")
    request.request_id = "abcdef0123456789"

    res = api_exception_handler(OperationalError("could not connect to server: 10.0.0.5"), {"request": request})

    assert res.status_code == 503
    body = res.data["error"]
    assert body["code"] == "transient"
    assert "10.0.0.5" not in json.dumps(body)
    assert body["request_id"] == "abcdef0123456789"


def test_stock_insufficient_details():
    request = APIRequestFactory().post("/api/v1/prescriptions/x/fulfill/")

    res = api_exception_handler(StockInsufficient(available=2, requested=3), {"request": request})

    assert res.status_code == 409
    assert res.data["error"]["code"] == "stock_insufficient"
    assert res.data["error"]["details"] == {"available": 2, "requested": 3}
    assert res.data["error"]["request_id"]


def test_unhandled_exception_is_server_error():
    request = APIRequestFactory().get("/api/v1/patients/")

    res = api_exception_handler(RuntimeError("boom"), {"request": request})

    assert res.status_code == 500
    assert res.data["error"]["code"] == "server_error"
    assert "boom" not in res.data["error"]["message"]

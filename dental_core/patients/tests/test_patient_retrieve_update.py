# dental_core/patients/tests/test_patient_retrieve_update.py
import pytest

from dental_core.audit.models import AuditEntry
from dental_core.conftest import client_for

pytestmark = pytest.mark.django_db


def test_patient_retrieve_ok(api_client):
    create = api_client.post(
        "/api/v1/patients/",
        {"full_name": "Pat One", "phone": "9999999999"},
        format="json",
    )
    assert create.status_code == 201, create.data
    pid = create.data["id"]

    r = api_client.get(f"/api/v1/patients/{pid}/")
    assert r.status_code == 200, r.data
    assert r.data["id"] == pid
    assert r.data["phone"] == "9999999999"
    assert AuditEntry.objects.filter(subject_id=pid, action="patient.created").exists()


def test_patient_patch_updates_fields(api_client, patient):
    p = api_client.patch(
        f"/api/v1/patients/{patient.id}/",
        {"phone": "8888888888", "email": "pat2@example.com"},
        format="json",
    )
    assert p.status_code == 200, p.data
    assert p.data["phone"] == "8888888888"
    assert p.data["email"] == "pat2@example.com"

    entry = AuditEntry.objects.get(subject_id=patient.id, action="patient.updated")
    assert entry.metadata == {"updated_fields": ["email", "phone"]}


def test_patient_patch_empty_body_returns_400(api_client, patient):
    res = api_client.patch(f"/api/v1/patients/{patient.id}/", {}, format="json")
    assert res.status_code == 400, res.data
    assert res.data["error"]["code"] == "validation_error"


def test_patient_search(api_client):
    api_client.post("/api/v1/patients/", {"full_name": "Alice Molar"}, format="json")
    api_client.post("/api/v1/patients/", {"full_name": "Bob Canine"}, format="json")

    res = api_client.get("/api/v1/patients/?q=molar")
    assert res.status_code == 200, res.data
    assert [r["full_name"] for r in res.data["results"]] == ["Alice Molar"]


def test_other_tenant_patient_is_not_found(other_doctor, patient):
    c = client_for(other_doctor)
    res = c.get(f"/api/v1/patients/{patient.id}/")
    assert res.status_code == 404
    assert res.data["error"]["code"] == "not_found"

    patch = c.patch(f"/api/v1/patients/{patient.id}/", {"phone": "1"}, format="json")
    assert patch.status_code == 404


def test_malformed_id_is_not_found(api_client):
    res = api_client.get("/api/v1/patients/not-a-uuid/")
    assert res.status_code == 404


def test_doctor_cannot_create_patient(doctor_client):
    res = doctor_client.post("/api/v1/patients/", {"full_name": "X"}, format="json")
    assert res.status_code == 403

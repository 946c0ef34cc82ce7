# dental_core/audit/tests/test_audit_api.py
import pytest

from dental_core.audit.models import AuditEntry
from dental_core.audit.services import AuditService
from dental_core.conftest import client_for
from dental_core.tenants.services import TenantLifecycleService

pytestmark = pytest.mark.django_db


def _log(tenant, action="inventory.adjusted"):
    return AuditService.log(
        action=action,
        subject_type="inventory_item",
        subject_id=tenant.id,
        tenant_id=tenant.id,
        actor_user_id=None,
    )


def test_entries_are_append_only(tenant):
    entry = _log(tenant)

    entry.reason = "rewritten"
    with pytest.raises(ValueError):
        entry.save()
    with pytest.raises(ValueError):
        entry.delete()
    assert AuditEntry.objects.get(id=entry.id).reason == ""


def test_clinic_admin_sees_only_own_tenant(api_client, tenant, other_tenant):
    mine = _log(tenant)
    _log(other_tenant)

    res = api_client.get("/api/v1/audit/entries/")
    assert res.status_code == 200, res.data
    assert [e["id"] for e in res.data["results"]] == [str(mine.id)]


def test_clinic_admin_cannot_query_other_tenant(api_client, other_tenant):
    res = api_client.get(f"/api/v1/audit/entries/?tenant_id={other_tenant.id}")
    assert res.status_code == 403
    assert res.data["error"]["code"] == "forbidden"


def test_system_owner_queries_any_tenant(owner_client, tenant, other_tenant):
    TenantLifecycleService.kill_switch(tenant_id=tenant.id, reason="Unpaid", actor_user_id=None)
    _log(other_tenant)

    res = owner_client.get(f"/api/v1/audit/entries/?tenant_id={tenant.id}&action=tenant.kill_switch")
    assert res.status_code == 200, res.data
    assert len(res.data["results"]) == 1
    row = res.data["results"][0]
    assert (row["from_state"], row["to_state"], row["reason"]) == ("ACTIVE", "SUSPENDED", "Unpaid")

    everything = owner_client.get("/api/v1/audit/entries/")
    assert everything.data["count"] == 2


def test_doctor_without_audit_view_is_forbidden(doctor_client):
    res = doctor_client.get("/api/v1/audit/entries/")
    assert res.status_code == 403


def test_invalid_filter_returns_400(api_client):
    res = api_client.get("/api/v1/audit/entries/?subject_id=nope")
    assert res.status_code == 400
    assert res.data["error"]["code"] == "validation_error"


def test_audit_is_read_only(api_client, system_owner):
    assert api_client.post("/api/v1/audit/entries/", {}, format="json").status_code in (403, 405)
    assert client_for(system_owner).post("/api/v1/audit/entries/", {}, format="json").status_code in (403, 405)

# dental_core/iam/tests/test_auth_and_me.py
from datetime import timedelta

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from dental_core.conftest import client_for, jwt_client_for
from dental_core.iam.models import UserProfile
from dental_core.iam.principal import resolve_principal

pytestmark = pytest.mark.django_db


def test_me_requires_auth():
    c = APIClient()
    res = c.get("/api/me/")
    assert res.status_code == 401
    assert res.data["error"]["code"] == "unauthorized"


def test_me_with_bearer_token_returns_principal_and_capabilities(doctor, tenant):
    res = jwt_client_for(doctor).get("/api/me/")
    assert res.status_code == 200, res.data

    body = res.json()
    assert body["user"]["id"] == doctor.id
    assert body["principal"]["tenant_id"] == str(tenant.id)
    assert body["principal"]["roles"] == ["DOCTOR"]
    assert body["tenant"]["code"] == tenant.code

    actions = {c["action"] for c in body["capabilities"]}
    assert "prescriptions:dispense" not in actions
    assert "prescriptions:create" in actions
    assert "inventory:adjust" not in actions
    assert [n["href"] for n in body["navigation"]][:2] == ["/clinical", "/appointments/mine"]


def test_me_accepts_access_cookie(doctor, settings):
    c = APIClient()
    c.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]] = str(AccessToken.for_user(doctor))
    res = c.get("/api/me/")
    assert res.status_code == 200, res.data
    assert res.json()["user"]["id"] == doctor.id


def test_expired_token_is_unauthorized(doctor):
    token = AccessToken.for_user(doctor)
    token.set_exp(lifetime=-timedelta(minutes=1))

    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    res = c.get("/api/me/")
    assert res.status_code == 401
    assert res.data["error"]["code"] == "unauthorized"


def test_garbage_token_is_unauthorized():
    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION="Bearer not-a-jwt")
    res = c.get("/api/me/")
    assert res.status_code == 401


def test_identity_without_profile_is_unauthorized(doctor):
    UserProfile.objects.filter(user=doctor).delete()
    res = jwt_client_for(doctor).get("/api/me/")
    assert res.status_code == 401


def test_system_owner_has_no_tenant(system_owner):
    res = client_for(system_owner).get("/api/me/")
    assert res.status_code == 200, res.data
    body = res.json()
    assert body["principal"]["tenant_id"] is None
    assert body["tenant"] is None
    assert {c["action"] for c in body["capabilities"]} >= {"system:kill_switch", "system:tenants:manage"}


def test_patient_principal_carries_patient_id(patient_user, patient):
    principal = resolve_principal(patient_user)
    assert principal.is_patient
    assert principal.patient_id == patient.id
    assert principal.roles == ("PATIENT",)


def test_resolve_principal_has_no_side_effects(doctor):
    before = UserProfile.objects.get(user=doctor).updated_at
    resolve_principal(doctor)
    resolve_principal(doctor)
    assert UserProfile.objects.get(user=doctor).updated_at == before


def test_system_owner_cannot_use_tenant_scoped_endpoints(system_owner):
    res = client_for(system_owner).get("/api/v1/patients/")
    assert res.status_code == 403
    assert res.data["error"]["code"] == "forbidden"

# dental_core/conftest.py
import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from dental_core.iam.models import PrincipalKind, UserProfile
from dental_core.inventory.models import InventoryItem
from dental_core.patients.models import Patient
from dental_core.tenants.models import Tenant


def make_user(username, *, tenant=None, kind=PrincipalKind.STAFF, roles=(), patient=None):
    """
    auth_user -> UserProfile (tenant, kind, ordered roles)
    """
    User = get_user_model()
    user = User.objects.create_user(username=username, password="testpass", is_active=True)
    UserProfile.objects.create(
        user=user,
        tenant=tenant,
        kind=kind,
        roles=list(roles),
        patient=patient,
        is_active=True,
    )
    return user


def client_for(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c


def jwt_client_for(user):
    """
    Real bearer token, so CookieOrHeaderJWTAuthentication runs.
    """
    c = APIClient()
    access = str(RefreshToken.for_user(user).access_token)
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
    return c


@pytest.fixture
def tenant(db):
    return Tenant.objects.create(code="test-clinic", name="Test Clinic")


@pytest.fixture
def other_tenant(db):
    return Tenant.objects.create(code="other-clinic", name="Other Clinic")


@pytest.fixture
def patient(db, tenant):
    return Patient.objects.create(tenant_id=tenant.id, full_name="Test Patient", phone="5550100")


@pytest.fixture
def other_patient(db, other_tenant):
    return Patient.objects.create(tenant_id=other_tenant.id, full_name="Other Patient")


@pytest.fixture
def system_owner(db):
    return make_user("owner", kind=PrincipalKind.SYSTEM_OWNER, roles=["SYSTEM_OWNER"])


@pytest.fixture
def admin_user(db, tenant):
    return make_user("clinic-admin", tenant=tenant, roles=["ADMIN"])


@pytest.fixture
def doctor(db, tenant):
    return make_user("doctor", tenant=tenant, roles=["DOCTOR"])


@pytest.fixture
def nurse(db, tenant):
    return make_user("nurse", tenant=tenant, roles=["NURSE"])


@pytest.fixture
def inventory_manager(db, tenant):
    return make_user("stock", tenant=tenant, roles=["INVENTORY_MANAGER"])


@pytest.fixture
def other_doctor(db, other_tenant):
    return make_user("other-doctor", tenant=other_tenant, roles=["DOCTOR"])


@pytest.fixture
def patient_user(db, tenant, patient):
    return make_user("patient", tenant=tenant, kind=PrincipalKind.PATIENT, roles=["PATIENT"], patient=patient)


@pytest.fixture
def api_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def doctor_client(doctor):
    return client_for(doctor)


@pytest.fixture
def owner_client(system_owner):
    return client_for(system_owner)


@pytest.fixture
def patient_client(patient_user):
    return client_for(patient_user)


@pytest.fixture
def make_item(db, tenant):
    def _make(*, name="Amoxicillin 500mg", quantity=10, reorder_threshold=2, tenant_id=None, id=None):
        extra = {"id": id} if id is not None else {}
        return InventoryItem.objects.create(
            **extra,
            tenant_id=tenant_id or tenant.id,
            name=name,
            quantity=quantity,
            reorder_threshold=reorder_threshold,
        )

    return _make


@pytest.fixture
def item(make_item):
    return make_item()


@pytest.fixture
def make_prescription(db, tenant, patient, doctor):
    from dental_core.prescriptions.services import PrescriptionService

    def _make(lines, *, tenant_id=None, patient_id=None):
        return PrescriptionService.create(
            tenant_id=tenant_id or tenant.id,
            actor_user_id=doctor.id,
            patient_id=patient_id or patient.id,
            medications=lines,
        )

    return _make


@pytest.fixture
def captured_events():
    """
    Records every published event name/payload for the duration of a test.
    """
    from dental_core.common import events

    seen = []
    names = [
        "prescription.filled",
        "prescription.cancelled",
        "inventory.low_stock",
        "tenant.status_changed",
    ]
    handlers = {}
    for name in names:
        def _handler(payload, _name=name):
            seen.append((_name, payload))
        handlers[name] = events.subscribe(name)(_handler)

    yield seen

    for name, fn in handlers.items():
        events.unsubscribe(name, fn)

# dental_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from dental_core.audit.api.views import AuditEntryViewSet
from dental_core.iam.api.me import MeView
from dental_core.inventory.api.views import InventoryItemViewSet
from dental_core.patients.api.views import PatientViewSet
from dental_core.prescriptions.api.views import PrescriptionViewSet
from dental_core.tenants.api.views import TenantViewSet

router = DefaultRouter()

# ViewSet-backed modules (centralized)
router.register(r"patients", PatientViewSet, basename="patients")
router.register(r"inventory/items", InventoryItemViewSet, basename="inventory-items")
router.register(r"prescriptions", PrescriptionViewSet, basename="prescriptions")
router.register(r"tenants", TenantViewSet, basename="tenants")
router.register(r"audit/entries", AuditEntryViewSet, basename="audit-entries")

urlpatterns = [
    path("me/", MeView.as_view(), name="me"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]

# dental_core/prescriptions/selectors.py
from __future__ import annotations

from typing import Optional
from uuid import UUID

from django.db.models import QuerySet

from dental_core.prescriptions.models import Prescription


def prescriptions_qs(*, tenant_id: UUID) -> QuerySet[Prescription]:
    return Prescription.objects.for_tenant(tenant_id)


def get_prescription_or_none(*, tenant_id: UUID, prescription_id: UUID) -> Optional[Prescription]:
    return prescriptions_qs(tenant_id=tenant_id).filter(id=prescription_id).first()


def prescriptions_for_patient(*, tenant_id: UUID, patient_id: UUID) -> QuerySet[Prescription]:
    return prescriptions_qs(tenant_id=tenant_id).filter(patient_id=patient_id).order_by("-created_at", "id")

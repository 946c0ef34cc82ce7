# dental_core/appointments/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet

from dental_core.appointments.models import Appointment


def appointments_for_patient(*, tenant_id: UUID, patient_id: UUID) -> QuerySet[Appointment]:
    return Appointment.objects.for_tenant(tenant_id).filter(patient_id=patient_id).order_by("-scheduled_at", "id")

# dental_core/patients/timeline.py
"""
Patient timeline: one chronological view over appointments, prescriptions and invoices.

Each source is read with its own query; nothing here writes. Ordering is fully
deterministic: newest first, then APPOINTMENT before PRESCRIPTION before INVOICE
at the same instant, then by id.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from django.conf import settings

from dental_core.appointments.selectors import appointments_for_patient
from dental_core.billing.selectors import invoices_for_patient
from dental_core.common.api.exceptions import Forbidden, NotFound
from dental_core.iam.capabilities import PATIENTS_VIEW
from dental_core.patients.selectors import patient_exists
from dental_core.prescriptions.selectors import prescriptions_for_patient

EVENT_APPOINTMENT = "APPOINTMENT"
EVENT_PRESCRIPTION = "PRESCRIPTION"
EVENT_INVOICE = "INVOICE"

TYPE_PRIORITY = {EVENT_APPOINTMENT: 0, EVENT_PRESCRIPTION: 1, EVENT_INVOICE: 2}


@dataclass(frozen=True)
class TimelineEvent:
    id: str
    type: str
    timestamp: datetime
    title: str
    status: str
    description: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict:
        return asdict(self)


def _from_appointment(a) -> TimelineEvent:
    return TimelineEvent(
        id=str(a.id),
        type=EVENT_APPOINTMENT,
        timestamp=a.scheduled_at,
        title=f"Dental Visit: {a.service_name or 'General Checkup'}",
        description=a.notes or None,
        status=a.status,
        metadata={
            "service_name": a.service_name,
            "doctor_user_id": a.doctor_user_id,
            "duration_minutes": a.duration_minutes,
        },
    )


def _from_prescription(rx) -> TimelineEvent:
    return TimelineEvent(
        id=str(rx.id),
        type=EVENT_PRESCRIPTION,
        timestamp=rx.created_at,
        title="Prescription Issued",
        description=rx.instructions or None,
        status=rx.status,
        metadata={
            "doctor_user_id": rx.doctor_user_id,
            "medications": rx.medications,
            "dispensed_at": rx.dispensed_at.isoformat() if rx.dispensed_at else None,
        },
    )


def _from_invoice(inv) -> TimelineEvent:
    return TimelineEvent(
        id=str(inv.id),
        type=EVENT_INVOICE,
        timestamp=inv.created_at,
        title="Invoice Generated",
        description=f"Amount: {inv.currency} {inv.total_amount}",
        status=inv.status,
        metadata={
            "invoice_number": inv.invoice_number,
            "total": str(inv.total_amount),
            "currency": inv.currency,
        },
    )


def sort_events(events: List[TimelineEvent]) -> List[TimelineEvent]:
    # two stable passes: tie-breakers first, then timestamp descending
    ordered = sorted(events, key=lambda e: (TYPE_PRIORITY.get(e.type, 99), e.id))
    return sorted(ordered, key=lambda e: e.timestamp, reverse=True)


class PatientTimelineService:
    @staticmethod
    def authorize(*, patient_id: UUID, tenant_id: Optional[UUID], requestor) -> None:
        """
        Patients may read only their own history; staff need a tenant matching the
        requested one and the patients:view capability. Platform principals are refused.
        """
        if requestor.is_patient:
            if requestor.patient_id is None or str(requestor.patient_id) != str(patient_id):
                raise Forbidden("You can only view your own history.")
            if tenant_id is None or str(requestor.tenant_id) != str(tenant_id):
                raise Forbidden()
            return

        if requestor.tenant_id is None or tenant_id is None or str(requestor.tenant_id) != str(tenant_id):
            raise Forbidden("Staff must belong to the patient's clinic.")
        if not requestor.can(PATIENTS_VIEW):
            raise Forbidden(f"Missing capability '{PATIENTS_VIEW}'.")

    @staticmethod
    def get_timeline(*, patient_id: UUID, tenant_id: Optional[UUID], requestor) -> List[TimelineEvent]:
        PatientTimelineService.authorize(patient_id=patient_id, tenant_id=tenant_id, requestor=requestor)

        if not patient_exists(tenant_id=tenant_id, patient_id=patient_id):
            raise NotFound("Patient")

        limit = getattr(settings, "TIMELINE_MAX_EVENTS", None)

        appointments = appointments_for_patient(tenant_id=tenant_id, patient_id=patient_id)
        prescriptions = prescriptions_for_patient(tenant_id=tenant_id, patient_id=patient_id)
        invoices = invoices_for_patient(tenant_id=tenant_id, patient_id=patient_id)
        if limit:
            appointments, prescriptions, invoices = appointments[:limit], prescriptions[:limit], invoices[:limit]

        events: List[TimelineEvent] = []
        events.extend(_from_appointment(a) for a in appointments)
        events.extend(_from_prescription(rx) for rx in prescriptions)
        events.extend(_from_invoice(inv) for inv in invoices)

        events = sort_events(events)
        return events[:limit] if limit else events

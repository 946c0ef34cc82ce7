# dental_core/patients/services.py
from __future__ import annotations

from uuid import UUID

from django.db import transaction

from dental_core.audit.services import AuditService
from dental_core.common.api.exceptions import NotFound
from dental_core.patients.models import Patient

UPDATABLE_FIELDS = {"full_name", "phone", "email", "gender", "date_of_birth", "allergies"}


class PatientService:
    @staticmethod
    @transaction.atomic
    def create_patient(
        *,
        tenant_id: UUID,
        actor_user_id: int | None,
        full_name: str,
        phone: str = "",
        email: str = "",
        gender: str = "",
        date_of_birth=None,
        allergies: str = "",
    ) -> Patient:
        patient = Patient.objects.create(
            tenant_id=tenant_id,
            full_name=full_name,
            phone=phone or "",
            email=email or "",
            gender=gender or "",
            date_of_birth=date_of_birth,
            allergies=allergies or "",
        )

        AuditService.log(
            action="patient.created",
            subject_type="patient",
            subject_id=patient.id,
            tenant_id=tenant_id,
            actor_user_id=actor_user_id,
        )
        return patient

    @staticmethod
    @transaction.atomic
    def update_patient(
        *,
        tenant_id: UUID,
        actor_user_id: int | None,
        patient_id: UUID,
        data: dict,
    ) -> Patient:
        patient = Patient.objects.select_for_update().filter(id=patient_id, tenant_id=tenant_id).first()
        if patient is None:
            raise NotFound("Patient")

        updates = {k: v for k, v in (data or {}).items() if k in UPDATABLE_FIELDS}

        for k, v in updates.items():
            setattr(patient, k, v)
        patient.save()

        AuditService.log(
            action="patient.updated",
            subject_type="patient",
            subject_id=patient.id,
            tenant_id=tenant_id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(updates.keys())},
        )
        return patient

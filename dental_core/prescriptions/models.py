# dental_core/prescriptions/models.py
from django.db import models

from dental_core.appointments.models import Appointment
from dental_core.common.models import TenantScopedModel
from dental_core.patients.models import Patient

MEDICATIONS_VERSION = 1


class PrescriptionStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    FILLED = "FILLED", "Filled"
    CANCELLED = "CANCELLED", "Cancelled"


class Prescription(TenantScopedModel):
    """
    PENDING -> FILLED | CANCELLED. Both outcomes are terminal.
    Status is only written by PrescriptionService.

    medications (version 1) is a list of lines:
        {"name", "dosage", "quantity", "instructions", "inventory_item_id" | null}
    """
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name="prescriptions")
    doctor_user_id = models.BigIntegerField(null=True, blank=True, db_index=True)
    appointment = models.ForeignKey(
        Appointment,
        on_delete=models.SET_NULL,
        related_name="prescriptions",
        null=True,
        blank=True,
    )

    medications = models.JSONField(default=list)
    medications_version = models.PositiveSmallIntegerField(default=MEDICATIONS_VERSION)
    instructions = models.TextField(blank=True)
    valid_until = models.DateField(null=True, blank=True)

    status = models.CharField(
        max_length=16,
        choices=PrescriptionStatus.choices,
        default=PrescriptionStatus.PENDING,
        db_index=True,
    )

    dispensed_at = models.DateTimeField(null=True, blank=True)
    dispensed_by_user_id = models.BigIntegerField(null=True, blank=True)

    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by_user_id = models.BigIntegerField(null=True, blank=True)
    cancel_reason = models.CharField(max_length=500, blank=True)

    class Meta:
        db_table = "prescriptions_prescription"
        indexes = [
            models.Index(fields=["tenant_id", "patient", "created_at"], name="rx_tenant_patient_idx"),
            models.Index(fields=["tenant_id", "status", "created_at"], name="rx_tenant_status_idx"),
        ]

    @property
    def is_terminal(self) -> bool:
        return self.status != PrescriptionStatus.PENDING

    def __str__(self) -> str:
        return f"Rx {self.id} ({self.status})"

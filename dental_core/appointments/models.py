# dental_core/appointments/models.py
from django.db import models

from dental_core.common.models import TenantScopedModel
from dental_core.patients.models import Patient


class AppointmentStatus(models.TextChoices):
    SCHEDULED = "SCHEDULED", "Scheduled"
    CONFIRMED = "CONFIRMED", "Confirmed"
    CHECKED_IN = "CHECKED_IN", "Checked In"
    IN_CHAIR = "IN_CHAIR", "In Chair"
    COMPLETED = "COMPLETED", "Completed"
    CANCELLED = "CANCELLED", "Cancelled"
    NO_SHOW = "NO_SHOW", "No Show"


ACTIVE_APPOINTMENT_STATES = (
    AppointmentStatus.SCHEDULED,
    AppointmentStatus.CONFIRMED,
    AppointmentStatus.CHECKED_IN,
    AppointmentStatus.IN_CHAIR,
)


class Appointment(TenantScopedModel):
    """
    A booked visit. Booking and slot handling belong to the scheduling collaborator;
    here appointments are read for the patient timeline and tenant stats.
    """
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name="appointments")
    doctor_user_id = models.BigIntegerField(null=True, blank=True, db_index=True)

    service_name = models.CharField(max_length=255, blank=True)
    scheduled_at = models.DateTimeField(db_index=True)
    duration_minutes = models.PositiveIntegerField(default=30)

    status = models.CharField(
        max_length=16,
        choices=AppointmentStatus.choices,
        default=AppointmentStatus.SCHEDULED,
        db_index=True,
    )
    notes = models.TextField(blank=True)

    class Meta:
        db_table = "appointments_appointment"
        indexes = [
            models.Index(fields=["tenant_id", "patient", "scheduled_at"], name="appt_tenant_patient_idx"),
            models.Index(fields=["tenant_id", "scheduled_at"], name="appt_tenant_time_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.service_name or 'Visit'} @ {self.scheduled_at:%Y-%m-%d %H:%M}"

# dental_core/patients/models.py
from django.db import models

from dental_core.common.models import TenantScopedModel


class Patient(TenantScopedModel):
    """
    Patient record owned by exactly one clinic (tenant).
    Referenced by appointments, prescriptions and invoices.
    """
    full_name = models.CharField(max_length=255)
    phone = models.CharField(max_length=32, blank=True)
    email = models.EmailField(blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=32, blank=True)
    allergies = models.TextField(blank=True)

    class Meta:
        db_table = "patients_patient"
        indexes = [
            models.Index(fields=["tenant_id", "full_name"], name="patient_tenant_name_idx"),
            models.Index(fields=["tenant_id", "phone"], name="patient_tenant_phone_idx"),
        ]

    def __str__(self) -> str:
        return self.full_name

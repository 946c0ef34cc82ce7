# dental_core/billing/models.py
from decimal import Decimal

from django.db import models

from dental_core.common.models import TenantScopedModel
from dental_core.patients.models import Patient


class InvoiceStatus(models.TextChoices):
    DRAFT = "DRAFT", "Draft"
    ISSUED = "ISSUED", "Issued"
    PARTIALLY_PAID = "PARTIALLY_PAID", "Partially Paid"
    PAID = "PAID", "Paid"
    VOID = "VOID", "Void"


class Invoice(TenantScopedModel):
    """
    Financial document for a patient. Totals are written by the billing collaborator;
    this service only reads invoices (patient timeline).
    """
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name="invoices")

    invoice_number = models.CharField(max_length=32, blank=True)
    status = models.CharField(max_length=32, choices=InvoiceStatus.choices, default=InvoiceStatus.DRAFT, db_index=True)

    currency = models.CharField(max_length=8, default="USD")
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    issued_at = models.DateTimeField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "billing_invoice"
        indexes = [
            models.Index(fields=["tenant_id", "patient", "created_at"], name="invoice_tenant_patient_idx"),
            models.Index(fields=["tenant_id", "status", "created_at"], name="invoice_tenant_status_idx"),
        ]

    def __str__(self) -> str:
        return self.invoice_number or str(self.id)

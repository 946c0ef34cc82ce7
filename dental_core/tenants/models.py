# dental_core/tenants/models.py
import uuid
from django.db import models


class TenantStatus(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    SUSPENDED = "SUSPENDED", "Suspended"
    FROZEN = "FROZEN", "Frozen"
    MAINTENANCE = "MAINTENANCE", "Maintenance"


class Tenant(models.Model):
    """
    A clinic account. Root of all scoping in the system.
    NOT a TenantScopedModel (it *is* the tenant).

    `status` is written only by TenantLifecycleService.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255)
    code = models.SlugField(max_length=64, unique=True)  # stable identifier (subdomain-friendly)

    status = models.CharField(
        max_length=16,
        choices=TenantStatus.choices,
        default=TenantStatus.ACTIVE,
        db_index=True,
    )

    # versioned document, shape enforced by tenants.settings_schema
    settings = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "tenants_tenant"
        indexes = [
            models.Index(fields=["status"], name="tenant_status_idx"),
            models.Index(fields=["created_at"], name="tenant_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"

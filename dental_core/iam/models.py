# dental_core/iam/models.py
import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from dental_core.patients.models import Patient
from dental_core.tenants.models import Tenant


class PrincipalKind(models.TextChoices):
    SYSTEM_OWNER = "SYSTEM_OWNER", "System Owner"
    STAFF = "STAFF", "Staff"
    PATIENT = "PATIENT", "Patient"


class UserProfile(models.Model):
    """
    Binds a verified auth identity to its tenant and ordered role list.

    - SYSTEM_OWNER: tenant is NULL (platform-wide).
    - STAFF: tenant required.
    - PATIENT: tenant + patient required; the principal's identity is the patient record.

    Rows are created by the staff-management collaborator; the core only reads them.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="dental_profile")
    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.PROTECT,
        related_name="user_profiles",
        null=True,
        blank=True,
    )
    kind = models.CharField(max_length=16, choices=PrincipalKind.choices, default=PrincipalKind.STAFF)

    # order matters: first role wins display-metadata conflicts in capability merges
    roles = models.JSONField(default=list, blank=True)

    patient = models.OneToOneField(
        Patient,
        on_delete=models.CASCADE,
        related_name="login_profile",
        null=True,
        blank=True,
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "iam_user_profile"
        indexes = [
            models.Index(fields=["tenant", "is_active"], name="iam_profile_tenant_idx"),
        ]

    def clean(self):
        if self.kind == PrincipalKind.SYSTEM_OWNER and self.tenant_id is not None:
            raise ValidationError({"tenant": "System owners are not bound to a tenant."})
        if self.kind != PrincipalKind.SYSTEM_OWNER and self.tenant_id is None:
            raise ValidationError({"tenant": "Staff and patient profiles require a tenant."})
        if self.kind == PrincipalKind.PATIENT and self.patient_id is None:
            raise ValidationError({"patient": "Patient profiles must reference a patient record."})
        if not isinstance(self.roles, list) or not all(isinstance(r, str) for r in self.roles):
            raise ValidationError({"roles": "Must be a list of role codes."})

    def __str__(self) -> str:
        tenant = self.tenant.code if self.tenant_id else "platform"
        return f"{self.user.username} ({tenant})"

# dental_core/common/models.py
from __future__ import annotations

import uuid
from django.db import models


class TimeStampedModel(models.Model):
    """
    Standard timestamps for all entities.
    """
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class TenantScopedQuerySet(models.QuerySet):
    def for_tenant(self, tenant_id):
        # a missing tenant never widens the query
        if tenant_id is None:
            return self.none()
        return self.filter(tenant_id=tenant_id)


class TenantScopedModel(TimeStampedModel):
    """
    Every row belongs to exactly one clinic. Reads go through
    `Model.objects.for_tenant(tenant_id)`, so a row of another tenant looks absent.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant_id = models.UUIDField(db_index=True)

    objects = TenantScopedQuerySet.as_manager()

    class Meta:
        abstract = True

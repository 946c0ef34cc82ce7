# dental_core/tenants/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from dental_core.tenants.models import Tenant
from dental_core.tenants.services import LIFECYCLE_ACTIONS, REASON_REQUIRED


class TenantSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tenant
        fields = [
            "id",
            "name",
            "code",
            "status",
            "settings",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class TenantCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    code = serializers.SlugField(max_length=64)
    settings = serializers.JSONField(required=False, default=dict)


class TenantChangeStatusSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=sorted(LIFECYCLE_ACTIONS))
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")
    estimated_duration = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if attrs["action"] in REASON_REQUIRED and not attrs.get("reason", "").strip():
            raise serializers.ValidationError({"reason": f"reason is required for {attrs['action']}."})
        return attrs


class TenantStatusResponseSerializer(serializers.Serializer):
    tenant_id = serializers.UUIDField()
    status = serializers.CharField()
    action = serializers.CharField()


class TenantDetailSerializer(serializers.Serializer):
    tenant = TenantSerializer()
    stats = serializers.DictField()

# dental_core/tenants/settings_schema.py
"""
Tenant.settings is a versioned document, validated at the boundary instead of being
passed through as an opaque blob.

    {
      "version": 1,
      "timezone": "UTC",
      "maintenance": {                # present only while status == MAINTENANCE
        "reason": "...",
        "estimated_duration": "2h",
        "previous_status": "ACTIVE",
        "enabled_at": "...",
        "enabled_by": 1
      }
    }
"""
from __future__ import annotations

from rest_framework import serializers

from dental_core.tenants.models import TenantStatus

SETTINGS_VERSION = 1


class MaintenanceInfoSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500)
    estimated_duration = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")
    previous_status = serializers.ChoiceField(choices=TenantStatus.choices)
    enabled_at = serializers.DateTimeField()
    enabled_by = serializers.IntegerField(required=False, allow_null=True, default=None)


class TenantSettingsSerializer(serializers.Serializer):
    version = serializers.IntegerField(required=False, default=SETTINGS_VERSION)
    timezone = serializers.CharField(max_length=64, required=False, default="UTC")
    maintenance = MaintenanceInfoSerializer(required=False, allow_null=True)

    def validate_version(self, value):
        if value != SETTINGS_VERSION:
            raise serializers.ValidationError(f"Unsupported settings version {value}.")
        return value


def normalize_settings(raw: dict | None) -> dict:
    """
    Validate and return the JSON-ready form of a settings document.
    Raises rest_framework ValidationError on a malformed document.
    """
    ser = TenantSettingsSerializer(data=raw or {})
    ser.is_valid(raise_exception=True)
    data = TenantSettingsSerializer(ser.validated_data).data
    if not data.get("maintenance"):
        data.pop("maintenance", None)
    return dict(data)

# dental_core/prescriptions/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from dental_core.prescriptions.models import Prescription


class MedicationLineSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    dosage = serializers.CharField(max_length=255)
    quantity = serializers.IntegerField(min_value=1)
    instructions = serializers.CharField(max_length=1000, required=False, allow_blank=True, default="")
    inventory_item_id = serializers.UUIDField(required=False, allow_null=True, default=None)


class PrescriptionCreateSerializer(serializers.Serializer):
    patient_id = serializers.UUIDField()
    appointment_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    medications = MedicationLineSerializer(many=True, allow_empty=False)
    instructions = serializers.CharField(required=False, allow_blank=True, default="")
    valid_until = serializers.DateField(required=False, allow_null=True, default=None)


class PrescriptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Prescription
        fields = [
            "id",
            "tenant_id",
            "patient_id",
            "doctor_user_id",
            "appointment_id",
            "medications",
            "medications_version",
            "instructions",
            "valid_until",
            "status",
            "dispensed_at",
            "dispensed_by_user_id",
            "cancelled_at",
            "cancel_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PrescriptionCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500)


class PrescriptionFulfillResponseSerializer(serializers.Serializer):
    prescription_id = serializers.UUIDField()
    status = serializers.CharField()
    dispensed_at = serializers.DateTimeField()

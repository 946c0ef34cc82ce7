# dental_core/prescriptions/admin.py
from django.contrib import admin

from dental_core.prescriptions.models import Prescription


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ("id", "patient", "status", "doctor_user_id", "dispensed_at", "created_at")
    list_filter = ("status",)
    search_fields = ("patient__full_name",)
    # lifecycle is owned by the prescription service
    readonly_fields = (
        "id",
        "status",
        "dispensed_at",
        "dispensed_by_user_id",
        "cancelled_at",
        "cancelled_by_user_id",
        "cancel_reason",
        "created_at",
        "updated_at",
    )
    ordering = ("-created_at",)

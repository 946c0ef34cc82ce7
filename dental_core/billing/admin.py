# dental_core/billing/admin.py
from django.contrib import admin

from dental_core.billing.models import Invoice


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ("invoice_number", "patient", "status", "currency", "total_amount", "tenant_id", "created_at")
    list_filter = ("status", "currency")
    search_fields = ("invoice_number",)
    readonly_fields = ("id", "created_at", "updated_at")
    ordering = ("-created_at",)

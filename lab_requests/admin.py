# lab_requests/admin.py

from django.contrib import admin

from .models import LabRequest, Patient


# =============================================================
# Patients
# =============================================================

@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("code", "full_name", "created_at")
    search_fields = ("code", "full_name")
    ordering = ("full_name",)


# =============================================================
# Lab requests (workflow fields READ-ONLY)
# =============================================================

@admin.register(LabRequest)
class LabRequestAdmin(admin.ModelAdmin):
    list_display = (
        "code",
        "patient",
        "type",
        "status",
        "requested_on",
        "completed_on",
        "canceled_on",
    )
    list_filter = ("status", "type")
    search_fields = ("code", "type", "patient__full_name", "patient__code")
    ordering = ("-requested_on",)
    list_select_related = ("patient",)

    # Status, result and notes only change through the lab workflow service
    readonly_fields = (
        "status",
        "result",
        "notes",
        "completed_on",
        "canceled_on",
        "created_at",
        "updated_at",
    )

    def get_readonly_fields(self, request, obj=None):
        if obj is None:
            return self.readonly_fields
        return self.readonly_fields + ("code", "patient", "type", "requested_on")

    def has_delete_permission(self, request, obj=None):
        return False

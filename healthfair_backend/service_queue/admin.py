from django.contrib import admin

from healthfair_backend.core.admin import healthfair_admin_site

from .models import QueueEntry


@admin.register(QueueEntry, site=healthfair_admin_site)
class QueueEntryAdmin(admin.ModelAdmin):
    list_display = ("id", "patient_visit", "service", "queue_position", "status", "doctor", "nurse", "updated_at")
    list_filter = ("status", "service", "patient_visit__event")
    search_fields = (
        "patient_visit__patient__first_name",
        "patient_visit__patient__last_name",
        "patient_visit__patient__patient_number",
    )
    raw_id_fields = ("patient_visit",)
    readonly_fields = ("created_at", "started_at", "completed_at", "updated_at")

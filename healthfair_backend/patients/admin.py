from django.contrib import admin

from healthfair_backend.core.admin import healthfair_admin_site

from .models import BasicScreening, Patient, PatientVisit


@admin.register(Patient, site=healthfair_admin_site)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("patient_number", "last_name", "first_name", "date_of_birth", "phone", "parish", "is_active")
    list_filter = ("is_active", "gender", "parish")
    search_fields = ("patient_number", "first_name", "last_name", "phone", "email")
    readonly_fields = ("patient_number", "created_at", "updated_at")


@admin.register(PatientVisit, site=healthfair_admin_site)
class PatientVisitAdmin(admin.ModelAdmin):
    list_display = ("event", "queue_number", "patient", "status", "visit_date")
    list_filter = ("event", "status")
    search_fields = ("patient__first_name", "patient__last_name", "patient__patient_number")
    raw_id_fields = ("patient",)


@admin.register(BasicScreening, site=healthfair_admin_site)
class BasicScreeningAdmin(admin.ModelAdmin):
    list_display = ("patient_visit", "blood_pressure_systolic", "blood_pressure_diastolic", "bmi", "screened_by", "updated_at")
    readonly_fields = ("bmi", "created_at", "updated_at")
    raw_id_fields = ("patient_visit",)

from django.contrib import admin

from healthfair_backend.core.admin import healthfair_admin_site

from .models import Doctor, Event, Location, Nurse, Service, StaffServicePermission


@admin.register(Location, site=healthfair_admin_site)
class LocationAdmin(admin.ModelAdmin):
    list_display = ("name", "address", "capacity", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name", "address")


@admin.register(Service, site=healthfair_admin_site)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("name", "duration_minutes", "is_intake_gate", "is_active")
    list_filter = ("is_intake_gate", "is_active")
    search_fields = ("name",)


@admin.register(Doctor, site=healthfair_admin_site)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ("last_name", "first_name", "specialization", "license_number", "is_active")
    list_filter = ("is_active",)
    search_fields = ("first_name", "last_name", "license_number")


@admin.register(Nurse, site=healthfair_admin_site)
class NurseAdmin(admin.ModelAdmin):
    list_display = ("last_name", "first_name", "certification_level", "license_number", "is_active")
    list_filter = ("is_active",)
    search_fields = ("first_name", "last_name", "license_number")


@admin.register(Event, site=healthfair_admin_site)
class EventAdmin(admin.ModelAdmin):
    list_display = ("name", "event_date", "location", "status", "is_active")
    list_filter = ("status", "is_active", "event_date")
    search_fields = ("name", "location__name")
    date_hierarchy = "event_date"
    filter_horizontal = ("services", "doctors", "nurses")


@admin.register(StaffServicePermission, site=healthfair_admin_site)
class StaffServicePermissionAdmin(admin.ModelAdmin):
    list_display = ("user", "service", "created_at")
    list_filter = ("service",)
    search_fields = ("user__username", "user__email", "service__name")

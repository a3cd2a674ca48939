"""
HealthFair - Custom Admin Site & core admin classes
"""

from django.contrib import admin
from django.contrib.admin import AdminSite
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import AuditLog, Role, User


class HealthFairAdminSite(AdminSite):
    """Admin site used by fair coordinators to maintain reference data."""
    site_header = "HealthFair - Event Administration"
    site_title = "HealthFair Admin"
    index_title = "Overview"
    site_url = None


healthfair_admin_site = HealthFairAdminSite(name='healthfair_admin')


@admin.register(Role, site=healthfair_admin_site)
class RoleAdmin(admin.ModelAdmin):
    list_display = ("name", "label")
    search_fields = ("name", "label")
    ordering = ("name",)


@admin.register(User, site=healthfair_admin_site)
class UserAdmin(DjangoUserAdmin):
    list_display = ("username", "email", "first_name", "last_name", "role", "professional_capacity", "is_active")
    list_filter = ("role", "professional_capacity", "is_active", "is_staff")
    search_fields = ("username", "email", "first_name", "last_name")
    ordering = ("username",)

    fieldsets = DjangoUserAdmin.fieldsets + (
        ("Health fair", {
            "fields": ("role", "professional_capacity", "phone"),
        }),
    )


@admin.register(AuditLog, site=healthfair_admin_site)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("timestamp", "action", "role_name", "user", "patient_id")
    list_filter = ("action", "role_name")
    search_fields = ("action", "user__username")
    ordering = ("-timestamp",)
    date_hierarchy = "timestamp"
    list_per_page = 100
    readonly_fields = ("user", "role_name", "action", "patient_id", "timestamp", "meta")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

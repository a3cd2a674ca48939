"""
Core App Configuration
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """App configuration for users, roles and the audit log."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'healthfair_backend.core'
    verbose_name = 'Core (Users & Roles)'

"""
Reports App Configuration
"""

from django.apps import AppConfig


class ReportsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'healthfair_backend.reports'
    verbose_name = 'Reports'

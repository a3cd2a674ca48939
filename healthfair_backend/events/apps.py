"""
Events App Configuration
"""

from django.apps import AppConfig


class EventsConfig(AppConfig):
    """Locations, services, providers and the fair events themselves."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'healthfair_backend.events'
    verbose_name = 'Events (Fairs & Reference Data)'

    def ready(self):
        from . import signals  # noqa: F401

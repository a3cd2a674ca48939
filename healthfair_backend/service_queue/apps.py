"""
Service Queue App Configuration
"""

from django.apps import AppConfig


class ServiceQueueConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'healthfair_backend.service_queue'
    verbose_name = 'Service Queue (Queue Boards)'

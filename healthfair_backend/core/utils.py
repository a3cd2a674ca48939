import logging

from rest_framework import status
from rest_framework.response import Response

from .models import AuditLog

logger = logging.getLogger(__name__)


def log_patient_action(user, action, patient_id=None, meta=None):
    """Write a patient/queue action to the audit log.

    Audit failures are logged and never break the request that triggered them.
    """

    role_name = ''
    role = getattr(user, 'role', None)
    if role is not None:
        role_name = getattr(role, 'name', '') or ''

    try:
        AuditLog.objects.using('default').create(
            user=user if getattr(user, 'is_authenticated', False) else None,
            role_name=role_name,
            action=action,
            patient_id=patient_id,
            meta=meta,
        )
    except Exception:
        logger.exception('AuditLog write failed (action=%s, patient_id=%s)', action, patient_id)


def parse_int_param(request, key: str, default=None):
    """Returns ``(value, error_response)``; the response is a 400 for non-integers."""
    value = request.query_params.get(key)
    if value in (None, ''):
        return default, None
    try:
        return int(value), None
    except ValueError:
        return None, Response(
            {'detail': f'{key} must be an integer.'},
            status=status.HTTP_400_BAD_REQUEST,
        )


"""Staff service permissions.

A staff member may operate the queues of the services granted to them via
``StaffServicePermission``; admins may operate every queue. The lookup runs
on every queue write, so the result is kept in the reference-data cache
under ``staff_permissions:<user_id>`` and dropped by the signals in
``events.signals`` whenever a grant or the user changes.
"""

from __future__ import annotations

from healthfair_backend.core.cache import get_or_fetch

from .models import StaffServicePermission


def staff_permissions_key(user_id) -> str:
    return f"staff_permissions:{user_id}"


def _empty_permissions() -> dict:
    return {
        'is_admin': False,
        'is_active': False,
        'allowed_service_ids': [],
        'allowed_services': [],
    }


def _load_staff_permissions(user) -> dict:
    grants = (
        StaffServicePermission.objects.using('default')
        .filter(user_id=user.id, service__is_active=True)
        .select_related('service')
        .order_by('service__name', 'service_id')
    )
    return {
        'is_admin': bool(getattr(user, 'is_fair_admin', False)),
        'is_active': bool(user.is_active),
        'allowed_service_ids': [g.service_id for g in grants],
        'allowed_services': [g.service.name for g in grants],
    }


def get_staff_permissions(user) -> dict:
    """Return ``{is_admin, is_active, allowed_service_ids, allowed_services}``."""
    if user is None or not getattr(user, 'is_authenticated', False):
        return _empty_permissions()
    return get_or_fetch(staff_permissions_key(user.id), None, lambda: _load_staff_permissions(user))


def can_operate_service(user, service_id) -> bool:
    perms = get_staff_permissions(user)
    if not perms['is_active']:
        return False
    if perms['is_admin']:
        return True
    return service_id in perms['allowed_service_ids']

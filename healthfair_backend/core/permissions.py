"""Core permissions for RBAC (Role-Based Access Control).

This module provides the base permission class following the project's
RBAC pattern with read_roles/write_roles.

Standard roles: admin, registration, doctor, nurse, technician
"""

from rest_framework.permissions import BasePermission, SAFE_METHODS


ALL_STAFF_ROLES = {"admin", "registration", "doctor", "nurse", "technician"}


class RBACPermission(BasePermission):
    """Base class for RBAC permissions with read_roles/write_roles pattern.

    Subclasses should define:
    - read_roles: set of role names that can perform GET/HEAD/OPTIONS
    - write_roles: set of role names that can perform POST/PUT/PATCH/DELETE

    Superusers pass every check.

    Example:
        class MyPermission(RBACPermission):
            read_roles = {"admin", "registration", "doctor"}
            write_roles = {"admin"}
    """

    read_roles: set = set()
    write_roles: set = set()

    def _role_name(self, request):
        user = getattr(request, "user", None)
        role = getattr(user, "role", None)
        return getattr(role, "name", None)

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False

        if getattr(user, "is_superuser", False):
            return True

        role_name = self._role_name(request)
        if not role_name:
            return False

        if request.method in SAFE_METHODS:
            return role_name in self.read_roles

        return role_name in self.write_roles


class ReferenceDataPermission(RBACPermission):
    """Locations, services, doctors, nurses.

    - every staff role: read
    - admin: write
    """

    read_roles = ALL_STAFF_ROLES
    write_roles = {"admin"}

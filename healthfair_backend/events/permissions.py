from healthfair_backend.core.permissions import ALL_STAFF_ROLES, RBACPermission


class EventPermission(RBACPermission):
    """RBAC for event endpoints.

    - every staff role: read (staff pick the event they work at)
    - admin: create/update events
    """

    read_roles = ALL_STAFF_ROLES
    write_roles = {"admin"}

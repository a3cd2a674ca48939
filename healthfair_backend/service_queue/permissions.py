from healthfair_backend.core.permissions import ALL_STAFF_ROLES, RBACPermission
from healthfair_backend.events.staff import can_operate_service


class QueuePermission(RBACPermission):
    """RBAC for queue boards and queue entry changes.

    - every staff role: read boards and summaries
    - admin, doctor, nurse, technician: change entries, but only for services
      they hold a ``StaffServicePermission`` for (admins: every service)
    """

    read_roles = ALL_STAFF_ROLES
    write_roles = {"admin", "doctor", "nurse", "technician"}

    def has_object_permission(self, request, view, obj):
        if request.method in ("GET", "HEAD", "OPTIONS"):
            return True
        return can_operate_service(request.user, obj.service_id)

from healthfair_backend.core.permissions import RBACPermission


class ReportPermission(RBACPermission):
    """Event and parish reports list patient details.

    - admin, registration: read
    - nobody writes (reports are derived)
    """

    read_roles = {"admin", "registration"}
    write_roles = set()

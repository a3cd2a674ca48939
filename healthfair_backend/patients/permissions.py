from healthfair_backend.core.permissions import ALL_STAFF_ROLES, RBACPermission


class PatientPermission(RBACPermission):
    """RBAC for patients, registrations and visits.

    - every staff role: read/search patients and visits
    - admin, registration: register, check in, edit patients, add services
    """

    read_roles = ALL_STAFF_ROLES
    write_roles = {"admin", "registration"}


class ScreeningPermission(RBACPermission):
    """Basic screening records.

    - every staff role: read
    - admin, doctor, nurse: record results
    """

    read_roles = ALL_STAFF_ROLES
    write_roles = {"admin", "doctor", "nurse"}

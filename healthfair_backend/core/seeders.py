from django.contrib.auth import get_user_model
from django.db import transaction

from .models import AuditLog, Role

User = get_user_model()

SEED_EMAIL_DOMAIN = "@seed.local"
SEED_PASSWORD = "test1234"


def seed_core(flush: bool = False) -> dict:
    """
    Seeds:
    - roles
    - staff users (one per role, plus clinical staff)

    With flush=True:
        - deletes audit log entries
        - deletes only users whose e-mail ends in '@seed.local' (never superusers)
    """
    stats: dict[str, int] = {}

    with transaction.atomic():
        if flush:
            AuditLog.objects.all().delete()
            User.objects.filter(is_superuser=False, email__endswith=SEED_EMAIL_DOMAIN).delete()

        roles = _seed_roles()
        stats["core_roles"] = len(roles)

        users = _seed_users(roles)
        stats["core_users"] = len(users)

    return stats


def _seed_roles() -> list[Role]:
    role_definitions = [
        ("admin", "Administrator"),
        ("registration", "Registration"),
        ("doctor", "Doctor"),
        ("nurse", "Nurse"),
        ("technician", "Technician"),
    ]

    roles: list[Role] = []
    for name, label in role_definitions:
        role, _created = Role.objects.get_or_create(name=name, defaults={"label": label})
        roles.append(role)
    return roles


def _seed_users(roles: list[Role]) -> list:
    by_name = {r.name: r for r in roles}
    users = []

    if not User.objects.filter(is_superuser=True).exists():
        su = User.objects.create_superuser(
            username="admin",
            email="admin@healthfair.local",
            password="admin",
        )
        su.role = by_name["admin"]
        su.professional_capacity = User.CAPACITY_ADMINISTRATION
        su.save()
        users.append(su)

    staff = [
        ("coordinator", "Marcia", "Campbell", "admin", User.CAPACITY_ADMINISTRATION),
        ("registration1", "Andre", "Brown", "registration", User.CAPACITY_REGISTRATION_TECHNICIAN),
        ("registration2", "Kerry-Ann", "Williams", "registration", User.CAPACITY_REGISTRATION_TECHNICIAN),
        ("dr.thompson", "Richard", "Thompson", "doctor", User.CAPACITY_DOCTOR),
        ("dr.clarke", "Natalie", "Clarke", "doctor", User.CAPACITY_DENTIST),
        ("nurse.reid", "Sandra", "Reid", "nurse", User.CAPACITY_NURSE),
        ("nurse.gordon", "Paul", "Gordon", "nurse", User.CAPACITY_NURSE),
        ("tech.morgan", "Kevin", "Morgan", "technician", User.CAPACITY_OPTICIAN),
    ]
    for username, first_name, last_name, role_name, capacity in staff:
        user = User.objects.filter(username=username).first()
        if user is None:
            user = User.objects.create_user(
                username=username,
                email=f"{username}{SEED_EMAIL_DOMAIN}",
                password=SEED_PASSWORD,
                first_name=first_name,
                last_name=last_name,
            )
        user.role = by_name[role_name]
        user.professional_capacity = capacity
        user.is_staff = role_name == "admin"
        user.save()
        users.append(user)

    return users

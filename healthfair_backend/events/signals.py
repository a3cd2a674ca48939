from django.conf import settings
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from healthfair_backend.core.cache import reference_cache

from .models import Doctor, Location, Nurse, Service, StaffServicePermission
from .staff import staff_permissions_key

REFERENCE_CACHE_KEYS = {
    Location: 'locations',
    Service: 'services',
    Doctor: 'doctors',
    Nurse: 'nurses',
}


def _invalidate_reference_list(sender, **kwargs):
    reference_cache.invalidate(REFERENCE_CACHE_KEYS[sender])


for _model in REFERENCE_CACHE_KEYS:
    post_save.connect(_invalidate_reference_list, sender=_model, dispatch_uid=f'refdata_save_{_model.__name__}')
    post_delete.connect(_invalidate_reference_list, sender=_model, dispatch_uid=f'refdata_delete_{_model.__name__}')


@receiver(post_save, sender=StaffServicePermission)
@receiver(post_delete, sender=StaffServicePermission)
def invalidate_staff_permissions(sender, instance, **kwargs):
    reference_cache.invalidate(staff_permissions_key(instance.user_id))


@receiver(post_save, sender=Service)
def invalidate_all_staff_permissions_on_service_change(sender, instance, created, **kwargs):
    """Service renames/deactivation change every grant's name list."""
    if created:
        return
    user_ids = StaffServicePermission.objects.filter(service=instance).values_list('user_id', flat=True)
    reference_cache.invalidate_many([staff_permissions_key(uid) for uid in user_ids])


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def invalidate_user_permissions(sender, instance, **kwargs):
    """Role or active flag changes alter is_admin/is_active."""
    reference_cache.invalidate(staff_permissions_key(instance.pk))

"""Basic screening ("Know Your Numbers") records, one per visit."""

from __future__ import annotations

import logging

from django.db import transaction

from healthfair_backend.core.utils import log_patient_action
from healthfair_backend.patients.models import BasicScreening, PatientVisit

logger = logging.getLogger(__name__)


def get_basic_screening(visit: PatientVisit) -> BasicScreening | None:
    return (
        BasicScreening.objects.using('default')
        .select_related('screened_by')
        .filter(patient_visit=visit)
        .first()
    )


def save_basic_screening(*, visit: PatientVisit, data: dict, user=None) -> tuple[BasicScreening, bool]:
    """Create or replace the screening record of ``visit``.

    Fields missing from ``data`` keep their stored value. Returns
    ``(screening, created)``; database errors propagate to the caller.
    """
    with transaction.atomic(using='default'):
        screening = (
            BasicScreening.objects.using('default')
            .select_for_update()
            .filter(patient_visit=visit)
            .first()
        )
        created = screening is None
        if created:
            screening = BasicScreening(patient_visit=visit)
        for name, value in data.items():
            setattr(screening, name, value)
        screening.save(using='default')

    logger.info('Saved basic screening of visit %s (created=%s)', visit.id, created)
    log_patient_action(
        user,
        'basic_screening_saved',
        patient_id=visit.patient_id,
        meta={'visit_id': visit.id, 'created': created, 'fields': sorted(data.keys())},
    )
    return screening, created

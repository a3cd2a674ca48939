"""
Queue entry mutations: status changes and provider assignment.

Status changes are deliberately permissive: any of the three statuses may be
set at any time. The only side effects are the timestamps:

- ``in_progress`` stamps ``started_at``
- ``completed`` stamps ``completed_at``
- ``waiting`` touches neither

Each change is one ``UPDATE ... WHERE id = ?``; fields not named stay as they
are. Concurrent writers race and the last one wins.
"""

from __future__ import annotations

import logging

from django.db import DatabaseError
from django.utils import timezone

from healthfair_backend.service_queue.exceptions import (
    InvalidQueueStatus,
    QueueEntryNotFound,
    QueueUpdateError,
)
from healthfair_backend.service_queue.models import QueueEntry

logger = logging.getLogger(__name__)

VALID_STATUSES = tuple(value for value, _label in QueueEntry.STATUS_CHOICES)


def status_update_fields(new_status: str, now=None) -> dict:
    """Column values written for a change to ``new_status``."""
    if new_status not in VALID_STATUSES:
        raise InvalidQueueStatus(new_status, VALID_STATUSES)
    now = now or timezone.now()
    fields = {'status': new_status, 'updated_at': now}
    if new_status == QueueEntry.STATUS_IN_PROGRESS:
        fields['started_at'] = now
    elif new_status == QueueEntry.STATUS_COMPLETED:
        fields['completed_at'] = now
    return fields


def _load(entry_id) -> QueueEntry:
    return (
        QueueEntry.objects.using('default')
        .select_related('service', 'patient_visit', 'patient_visit__patient', 'doctor', 'nurse')
        .get(pk=entry_id)
    )


def update_queue_entry_status(entry_id, new_status: str) -> QueueEntry:
    """Set the status of one queue entry and return the re-read row.

    Raises:
        InvalidQueueStatus: ``new_status`` is not waiting/in_progress/completed
        QueueEntryNotFound: no entry with ``entry_id``
        QueueUpdateError: the database rejected the write
    """
    fields = status_update_fields(new_status)
    try:
        updated = QueueEntry.objects.using('default').filter(pk=entry_id).update(**fields)
        if not updated:
            raise QueueEntryNotFound(entry_id)
        entry = _load(entry_id)
    except DatabaseError as exc:
        logger.exception('Updating status of queue entry %s to %s failed', entry_id, new_status)
        raise QueueUpdateError() from exc

    logger.info('Queue entry %s -> %s', entry_id, new_status)
    return entry


def assign_providers(entry_id, **changes) -> QueueEntry:
    """Set or clear the doctor and/or nurse of one queue entry.

    Only the keys given (``doctor`` / ``nurse``; ``None`` clears) are written.
    """
    fields = {k: v for k, v in changes.items() if k in ('doctor', 'nurse')}
    try:
        if fields:
            fields['updated_at'] = timezone.now()
            updated = QueueEntry.objects.using('default').filter(pk=entry_id).update(**fields)
        else:
            updated = QueueEntry.objects.using('default').filter(pk=entry_id).count()
        if not updated:
            raise QueueEntryNotFound(entry_id)
        entry = _load(entry_id)
    except DatabaseError as exc:
        logger.exception('Assigning providers to queue entry %s failed', entry_id)
        raise QueueUpdateError("Failed to update assignment. Please try again.") from exc

    logger.info(
        'Queue entry %s assigned doctor=%s nurse=%s',
        entry_id, entry.doctor_id, entry.nurse_id,
    )
    return entry

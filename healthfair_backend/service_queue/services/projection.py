"""
Queue board projection.

Turns the flat list of queue entries of one event into the per-service
groups shown on the staff queue boards:

1. ``completed_intake_visits``: the gate. A visit is admitted to its other
   services once an intake entry (``Service.is_intake_gate``) of that visit
   is ``completed``.
2. ``group_rows``: one group per service in first-seen order; intake rows
   are always kept, other rows only when their visit's gate is open.
   A group whose rows were all dropped is still returned (empty).
3. ``sort_groups`` / ``sort_group_rows``: intake group first, the rest by
   name (case-insensitive); rows by status rank then queue position.

Steps 1-3 take plain sequences and never touch the database, so they work on
unsaved instances. ``build_queue_board`` and ``summarize_queue`` add the
row source on top.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from healthfair_backend.events.models import Event, Service
from healthfair_backend.patients.services.registration import get_intake_service
from healthfair_backend.service_queue.models import QueueEntry

logger = logging.getLogger(__name__)


STATUS_RANK = {
    QueueEntry.STATUS_WAITING: 0,
    QueueEntry.STATUS_IN_PROGRESS: 1,
    QueueEntry.STATUS_COMPLETED: 2,
}
UNKNOWN_STATUS_RANK = 3


@dataclass
class ServiceGroup:
    service: Service
    patients: list = field(default_factory=list)

    @property
    def service_id(self):
        return self.service.id

    @property
    def is_intake(self) -> bool:
        return bool(self.service.is_intake_gate)


@dataclass
class QueueBoard:
    event_id: int
    intake_configured: bool
    groups: list[ServiceGroup] = field(default_factory=list)


def is_intake_row(row: QueueEntry) -> bool:
    return bool(row.service.is_intake_gate)


# ---------------------------------------------------------------------------
# Gate / group / sort
# ---------------------------------------------------------------------------

def completed_intake_visits(rows: Iterable[QueueEntry] | None) -> set:
    """Visit ids with at least one completed intake entry."""
    return {
        row.patient_visit_id
        for row in rows or ()
        if is_intake_row(row) and row.status == QueueEntry.STATUS_COMPLETED
    }


def group_rows(rows: Iterable[QueueEntry], gate_open: set) -> list[ServiceGroup]:
    groups: dict = {}
    for row in rows:
        group = groups.get(row.service_id)
        if group is None:
            group = groups[row.service_id] = ServiceGroup(service=row.service)
        if is_intake_row(row) or row.patient_visit_id in gate_open:
            group.patients.append(row)
    return list(groups.values())


def row_sort_key(row: QueueEntry):
    return (STATUS_RANK.get(row.status, UNKNOWN_STATUS_RANK), row.queue_position or 0)


def sort_group_rows(rows: Iterable[QueueEntry]) -> list[QueueEntry]:
    return sorted(rows, key=row_sort_key)


def sort_groups(groups: Iterable[ServiceGroup]) -> list[ServiceGroup]:
    """Intake group first, then by service name (case-insensitive, stable).

    Each group's patients are sorted with ``sort_group_rows``.
    """
    ordered = sorted(groups, key=lambda g: (not g.is_intake, (g.service.name or '').casefold()))
    for group in ordered:
        group.patients = sort_group_rows(group.patients)
    return ordered


def project_queue(rows) -> list[ServiceGroup]:
    rows = list(rows)
    return sort_groups(group_rows(rows, completed_intake_visits(rows)))


# ---------------------------------------------------------------------------
# Row source
# ---------------------------------------------------------------------------

def fetch_queue_rows(event_id) -> list[QueueEntry]:
    """All queue entries of ``event_id`` with their service, visit, patient and providers."""
    return list(
        QueueEntry.objects.using('default')
        .filter(patient_visit__event_id=event_id)
        .select_related('service', 'patient_visit', 'patient_visit__patient', 'doctor', 'nurse')
        .order_by('queue_position', 'id')
    )


def intake_configured(event_id, rows) -> bool:
    """Whether the queue of ``event_id`` has an intake gate.

    With rows, an intake row must be among them. An empty queue is gated
    when registration would find an intake service for the event.
    """
    if rows:
        return any(is_intake_row(r) for r in rows)
    event = Event.objects.using('default').filter(pk=event_id).first()
    return event is not None and get_intake_service(event) is not None


def build_queue_board(event_id, *, status=None, service_id=None) -> QueueBoard:
    """Project the queue of ``event_id``.

    ``status`` and ``service_id`` narrow the output after the gate has been
    evaluated on the full row set.
    """
    rows = fetch_queue_rows(event_id)
    configured = intake_configured(event_id, rows)
    if not configured:
        logger.warning('No intake service configured; non-intake queues of event %s stay empty', event_id)

    groups = project_queue(rows)
    if service_id is not None:
        groups = [g for g in groups if g.service_id == service_id]
    if status:
        for group in groups:
            group.patients = [r for r in group.patients if r.status == status]

    return QueueBoard(event_id=event_id, intake_configured=configured, groups=groups)


def summarize_queue(event_id) -> list[dict]:
    """Per-service counts for ``event_id``, intake first, then by name.

    Counts cover every entry of the service, gated or not.
    """
    summary: dict = {}
    services: list = []
    for row in fetch_queue_rows(event_id):
        bucket = summary.get(row.service_id)
        if bucket is None:
            services.append(row.service)
            bucket = summary[row.service_id] = {
                'total_registered': 0,
                QueueEntry.STATUS_WAITING: 0,
                QueueEntry.STATUS_IN_PROGRESS: 0,
                QueueEntry.STATUS_COMPLETED: 0,
            }
        bucket['total_registered'] += 1
        if row.status in bucket:
            bucket[row.status] += 1

    ordered = sorted(services, key=lambda s: (not s.is_intake_gate, (s.name or '').casefold()))
    return [
        {
            'service_id': s.id,
            'service_name': s.name,
            'is_intake_gate': s.is_intake_gate,
            **summary[s.id],
        }
        for s in ordered
    ]


"""
Queue exceptions for the service_queue app.

These exceptions are raised by the queue services and should be
translated to appropriate DRF responses in the views.
"""

from __future__ import annotations

from typing import Any


class QueueError(Exception):
    """Base exception for all queue-related errors."""

    def to_dict(self) -> dict[str, Any]:
        return {'detail': str(self)}


class QueueEntryNotFound(QueueError):
    """Raised when a status or assignment change targets an unknown entry."""

    def __init__(self, entry_id):
        self.entry_id = entry_id
        super().__init__(f"Queue entry {entry_id} does not exist")

    def to_dict(self) -> dict[str, Any]:
        return {'detail': str(self), 'entry_id': self.entry_id}


class InvalidQueueStatus(QueueError):
    """Raised when the requested status is not one of waiting/in_progress/completed."""

    def __init__(self, status, allowed):
        self.status = status
        self.allowed = list(allowed)
        super().__init__(f"Invalid queue status: {status!r}")

    def to_dict(self) -> dict[str, Any]:
        return {'detail': str(self), 'status': self.status, 'allowed': self.allowed}


class QueueUpdateError(QueueError):
    """
    Raised when the store rejects a queue write.

    The message is safe to show to staff; the underlying database error is
    chained as ``__cause__`` and logged where it happened.
    """

    def __init__(self, message: str = "Failed to update queue status. Please try again."):
        super().__init__(message)

from __future__ import annotations

from enum import Enum


class EventStatus(str, Enum):
    """Lifecycle state of an event as stored in the database."""

    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"


class DetectionStatus(str, Enum):
    """Outcome of reporting one detected card."""

    CREATED = "created"
    DUPLICATE = "duplicate"
    FAILED = "failed"


class PendingCardChange(str, Enum):
    INSERT = "insert"
    DELETE = "delete"

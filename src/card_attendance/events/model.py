from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.enums import EventStatus


@dataclass(frozen=True)
class Event:
    """Domain entity: an event devices check students in to."""

    id: int
    name: str
    description: Optional[str]
    start_time: datetime
    end_time: datetime
    status: EventStatus
    created_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "startTime": to_iso(self.start_time),
            "endTime": to_iso(self.end_time),
            "status": self.status.value,
            "createdAt": to_iso(self.created_at),
        }


@dataclass(frozen=True)
class EventDraft:
    """Validated fields for create/update."""

    name: str
    description: Optional[str]
    start_time: datetime
    end_time: datetime
    status: EventStatus

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import EventStatus
from .model import Event, EventDraft


class EventRepository(Protocol):
    """Events are soft-deleted; every read here ignores deleted rows.

    Writes that make an event active also complete every other active event,
    in the same transaction.
    """

    def get(self, event_id: int) -> Optional[Event]:
        raise NotImplementedError

    def list(self, *, status: Optional[EventStatus] = None) -> Sequence[Event]:
        raise NotImplementedError

    def list_active(self, *, limit: int = 2) -> Sequence[Event]:
        raise NotImplementedError

    def create(self, draft: EventDraft, *, created_by: Optional[str] = None) -> Event:
        raise NotImplementedError

    def update(self, event_id: int, draft: EventDraft) -> Optional[Event]:
        raise NotImplementedError

    def activate(self, event_id: int) -> Optional[Event]:
        raise NotImplementedError

    def set_status(self, event_id: int, status: EventStatus) -> Optional[Event]:
        raise NotImplementedError

    def soft_delete(self, event_id: int, *, deleted_at: datetime) -> bool:
        raise NotImplementedError

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_utc, parse_iso_datetime
from ..core.enums import EventStatus
from ..core.exceptions import ConflictError, DuplicateEntryError, InvariantViolationError, NotFoundError, ValidationError
from .model import Event, EventDraft
from .repository import EventRepository

logger = logging.getLogger(__name__)

_CONCURRENT_ACTIVATION = "Another event was activated at the same time, please retry"


def _field(payload: dict, snake: str, camel: str):
    value = payload.get(snake)
    return value if value not in (None, "") else payload.get(camel)


def parse_status(value: object) -> EventStatus:
    try:
        return EventStatus(str(value))
    except ValueError:
        raise ValidationError("Invalid status. Must be: upcoming, active, or completed")


def _parse_time(value: object, field_name: str) -> datetime:
    if isinstance(value, datetime):
        return value
    try:
        return parse_iso_datetime(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO 8601 timestamp")


def parse_event_draft(payload: dict) -> EventDraft:
    """Validate a create/update body (snake_case or camelCase keys)."""
    name = _field(payload, "name", "name")
    start = _field(payload, "start_time", "startTime")
    end = _field(payload, "end_time", "endTime")
    status = payload.get("status")

    if not name or not str(name).strip() or not start or not end or not status:
        raise ValidationError("Missing required fields: name, start_time, end_time, status")

    draft = EventDraft(
        name=str(name).strip(),
        description=(str(payload.get("description") or "").strip() or None),
        start_time=_parse_time(start, "start_time"),
        end_time=_parse_time(end, "end_time"),
        status=parse_status(status),
    )
    if draft.start_time >= draft.end_time:
        raise ValidationError("Start time must be before end time")
    return draft


class EventService:
    """Event lifecycle: upcoming -> active -> completed, soft delete from any state.

    At most one live event is active. Making an event active completes the others
    in the same store transaction; the store's single-active key rejects a
    concurrent second activation, which surfaces here as ConflictError.
    """

    def __init__(self, events: EventRepository):
        self._events = events

    def list_events(self, *, status: Optional[str] = None) -> Sequence[Event]:
        wanted = parse_status(status) if status else None
        return self._events.list(status=wanted)

    def get_event(self, event_id: int) -> Event:
        event = self._events.get(int(event_id))
        if not event:
            raise NotFoundError("Event not found")
        return event

    def create_event(self, payload: dict, *, created_by: Optional[str] = None) -> Event:
        draft = parse_event_draft(payload)
        try:
            event = self._events.create(draft, created_by=created_by)
        except DuplicateEntryError:
            raise ConflictError(_CONCURRENT_ACTIVATION)
        logger.info("Event %s created (%s)", event.id, event.status.value)
        return event

    def update_event(self, event_id: int, payload: dict) -> Event:
        draft = parse_event_draft(payload)
        try:
            event = self._events.update(int(event_id), draft)
        except DuplicateEntryError:
            raise ConflictError(_CONCURRENT_ACTIVATION)
        if not event:
            raise NotFoundError("Event not found")
        return event

    def activate(self, event_id: int) -> Event:
        try:
            event = self._events.activate(int(event_id))
        except DuplicateEntryError:
            raise ConflictError(_CONCURRENT_ACTIVATION)
        if not event:
            raise NotFoundError("Event not found")
        logger.info("Event %s activated", event.id)
        return event

    def end(self, event_id: int) -> Event:
        event = self._events.set_status(int(event_id), EventStatus.COMPLETED)
        if not event:
            raise NotFoundError("Event not found")
        logger.info("Event %s ended", event.id)
        return event

    def delete(self, event_id: int, *, now: datetime | None = None) -> None:
        if not self._events.soft_delete(int(event_id), deleted_at=now or now_utc()):
            raise NotFoundError("Event not found")
        logger.info("Event %s deleted", event_id)

    def current_active(self) -> Optional[Event]:
        """The single active event, or None.

        Two active rows mean the single-active invariant is broken; that is
        reported rather than resolved by picking one.
        """
        active = list(self._events.list_active(limit=2))
        if len(active) > 1:
            logger.error("Multiple active events: %s", [e.id for e in active])
            raise InvariantViolationError("Multiple active events")
        return active[0] if active else None

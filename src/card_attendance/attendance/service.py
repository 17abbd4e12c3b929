from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_utc
from ..common.validators import normalize_card_uid
from ..core.exceptions import (
    AlreadyCheckedInError,
    CardNotRegisteredError,
    DuplicateEntryError,
    NotRegisteredForEventError,
    UnavailableError,
)
from ..events.service import EventService
from ..registrations.repository import RegistrationRepository
from ..students.repository import StudentRepository
from .model import ActiveEventSummary, AttendanceReport, CheckInResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Check-in state machine for card taps during the active event."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        registrations: RegistrationRepository,
        students: StudentRepository,
        events: EventService,
    ):
        self._attendance = attendance
        self._registrations = registrations
        self._students = students
        self._events = events

    def check_in(self, card_uid: object, *, event_id: Optional[int] = None, now: datetime | None = None) -> CheckInResult:
        """Record one attendance for the card's student in the active event.

        Steps short-circuit in order: no active event, unknown card, not
        registered, already checked in. The pre-insert existence check only
        gives a friendlier answer; the store's unique key decides races.
        """
        uid = normalize_card_uid(card_uid)
        now = now or now_utc()

        event = self._events.current_active()
        if event_id is not None and (not event or int(event_id) != event.id):
            raise UnavailableError("Event not found or no longer active")
        if not event:
            raise UnavailableError("No active event")

        student = self._students.get_by_card_uid(uid)
        if not student:
            raise CardNotRegisteredError("Card not registered")

        if not self._registrations.exists(student_pk=student.id, event_id=event.id):
            raise NotRegisteredForEventError("Not registered for this event")

        if self._attendance.exists(student_pk=student.id, event_id=event.id):
            raise AlreadyCheckedInError("Already checked in")

        try:
            self._attendance.create(student_pk=student.id, event_id=event.id, checked_in_at=now)
        except DuplicateEntryError:
            logger.info("Concurrent duplicate tap for student %s in event %s", student.student_number, event.id)
            raise AlreadyCheckedInError("Already checked in")

        logger.info("Student %s checked in to event %s", student.student_number, event.id)
        return CheckInResult(
            student=student,
            event=event,
            checked_in_at=now,
            attended_count=self._attendance.count_for_event(event.id),
            registered_count=self._registrations.count_for_event(event.id),
        )

    def active_event_summary(self) -> Optional[ActiveEventSummary]:
        event = self._events.current_active()
        if not event:
            return None
        return ActiveEventSummary(
            event=event,
            registered_count=self._registrations.count_for_event(event.id),
            attended_count=self._attendance.count_for_event(event.id),
        )

    def attendance_report(self, event_id: int) -> AttendanceReport:
        event = self._events.get_event(event_id)
        return AttendanceReport(event=event, attendees=self._attendance.list_attendees(event.id))

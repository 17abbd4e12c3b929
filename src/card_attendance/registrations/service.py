from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from ..common.csv_utils import parse_csv_upload
from ..common.datetime_utils import now_utc
from ..core.constants import MAX_REGISTRATIONS_PER_IMPORT
from ..core.enums import EventStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..events.model import Event
from ..events.repository import EventRepository
from ..students.repository import StudentRepository
from .model import ImportRowError, OfflineRegistration, RegistrationImportReport
from .repository import RegistrationRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OfflineRoster:
    event: Event
    registrations: Sequence[OfflineRegistration]

    def to_dict(self) -> dict:
        return {
            "eventId": self.event.id,
            "eventName": self.event.name,
            "registrations": [r.to_dict() for r in self.registrations],
            "totalRegistrations": len(self.registrations),
        }


class RegistrationService:
    """Bulk registration import and the read-only roster export for devices."""

    def __init__(
        self,
        registrations: RegistrationRepository,
        students: StudentRepository,
        events: EventRepository,
        *,
        max_rows: int = MAX_REGISTRATIONS_PER_IMPORT,
    ):
        self._registrations = registrations
        self._students = students
        self._events = events
        self._max_rows = int(max_rows)

    def import_csv(self, content: bytes | str, event_id: int, *, now: datetime | None = None) -> RegistrationImportReport:
        """Register every ``student_id`` in the CSV for the event, all or nothing.

        Nothing is written unless every row has a student id and every id resolves
        to a known student. Re-importing overlapping files is safe: pairs already
        registered count as skipped.
        """
        parsed = parse_csv_upload(content)
        if not parsed.rows:
            raise ValidationError("CSV file is empty")
        if len(parsed.rows) > self._max_rows:
            raise ValidationError(f"Maximum {self._max_rows} registrations allowed per import")
        if "student_id" not in parsed.headers:
            raise ValidationError('CSV must contain "student_id" column')

        report = RegistrationImportReport()
        entries: list[tuple[int, str]] = []
        for line, row in zip(parsed.line_numbers, parsed.rows):
            number = (row.get("student_id") or "").strip()
            if not number:
                report.errors.append(ImportRowError(line=line, student_id="(empty)", error="Missing student_id"))
                continue
            entries.append((line, number))
        if report.errors:
            return report

        event = self._events.get(int(event_id))
        if not event:
            raise NotFoundError("Event not found or has been deleted")

        known = self._students.find_by_student_numbers([n for _, n in entries])
        pk_by_number = {s.student_number: s.id for s in known}
        for line, number in entries:
            if number not in pk_by_number:
                report.errors.append(
                    ImportRowError(line=line, student_id=number, error="Student ID not found in database")
                )
        if report.errors:
            return report

        pairs = [(pk_by_number[n], event.id) for _, n in entries]
        inserted = self._registrations.insert_ignoring_duplicates(pairs, registered_at=now or now_utc())

        report.success = inserted
        report.skipped = len(pairs) - inserted
        report.event_name = event.name
        logger.info("Registration import for event %s: %d inserted, %d skipped", event.id, inserted, report.skipped)
        return report

    def roster_for_device(self, event_id: int) -> OfflineRoster:
        event = self._events.get(int(event_id))
        if not event:
            raise NotFoundError("Event not found")
        # Devices may be staged before activation, so upcoming is fine too.
        if event.status == EventStatus.COMPLETED:
            raise ValidationError("Event has already ended")
        return OfflineRoster(event=event, registrations=self._registrations.list_with_cards(event.id))

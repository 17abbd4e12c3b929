from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import to_iso
from ..events.model import Event
from ..students.model import Student


@dataclass(frozen=True)
class Attendee:
    """Read-model for attendance reports and CSV export."""

    student_number: str
    name: str
    email: Optional[str]
    checked_in_at: datetime

    def to_dict(self) -> dict:
        return {
            "studentId": self.student_number,
            "name": self.name,
            "email": self.email,
            "checkedInAt": to_iso(self.checked_in_at),
        }


@dataclass(frozen=True)
class CheckInResult:
    student: Student
    event: Event
    checked_in_at: datetime
    attended_count: int
    registered_count: int

    def to_dict(self) -> dict:
        return {
            "success": True,
            "student": {"name": self.student.name, "studentId": self.student.student_number},
            "event": {"id": self.event.id, "name": self.event.name},
            "checkedInAt": to_iso(self.checked_in_at),
            "attendedCount": self.attended_count,
            "registeredCount": self.registered_count,
        }


@dataclass(frozen=True)
class ActiveEventSummary:
    event: Event
    registered_count: int
    attended_count: int

    def to_dict(self) -> dict:
        return {
            "id": self.event.id,
            "name": self.event.name,
            "description": self.event.description,
            "startTime": to_iso(self.event.start_time),
            "endTime": to_iso(self.event.end_time),
            "registeredCount": self.registered_count,
            "attendedCount": self.attended_count,
        }


@dataclass(frozen=True)
class AttendanceReport:
    event: Event
    attendees: Sequence[Attendee]

    def to_dict(self) -> dict:
        return {
            "event": self.event.to_dict(),
            "attendees": [a.to_dict() for a in self.attendees],
            "totalAttendees": len(self.attendees),
        }

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import Attendee


class AttendanceRepository(Protocol):
    def exists(self, *, student_pk: int, event_id: int) -> bool:
        raise NotImplementedError

    def create(self, *, student_pk: int, event_id: int, checked_in_at: datetime) -> int:
        """Insert the attendance row.

        Raises DuplicateEntryError when the (student, event) pair already exists;
        the unique key is the real guard against concurrent duplicate taps.
        """

        raise NotImplementedError

    def count_for_event(self, event_id: int) -> int:
        raise NotImplementedError

    def list_attendees(self, event_id: int) -> Sequence[Attendee]:
        """Attendees ordered by check-in time."""

        raise NotImplementedError

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import OfflineRegistration


class RegistrationRepository(Protocol):
    def insert_ignoring_duplicates(self, pairs: Sequence[tuple[int, int]], *, registered_at: datetime) -> int:
        """Bulk insert ``(student_pk, event_id)`` pairs in one statement.

        Pairs already registered are skipped by the store's unique key.
        Returns the number of rows actually inserted.
        """

        raise NotImplementedError

    def exists(self, *, student_pk: int, event_id: int) -> bool:
        raise NotImplementedError

    def count_for_event(self, event_id: int) -> int:
        raise NotImplementedError

    def list_with_cards(self, event_id: int) -> Sequence[OfflineRegistration]:
        """Registered students that hold a bound card."""

        raise NotImplementedError

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import NewStudent, Student


class StudentRepository(Protocol):
    """Repository interface for Student.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, student_pk: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_student_number(self, student_number: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_card_uid(self, card_uid: str) -> Optional[Student]:
        raise NotImplementedError

    def find_by_student_numbers(self, student_numbers: Sequence[str]) -> Sequence[Student]:
        """Batch lookup in a single query; unknown numbers are simply absent."""

        raise NotImplementedError

    def bind_card(self, *, student_pk: int, card_uid: str) -> bool:
        """Set the card only while the student has none.

        Returns False when the student already holds a card (or vanished);
        raises DuplicateEntryError when another student holds ``card_uid``.
        """

        raise NotImplementedError

    def create_many(self, students: Sequence[NewStudent]) -> int:
        raise NotImplementedError

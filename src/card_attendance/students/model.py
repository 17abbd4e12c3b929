from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a student identity.

    ``student_number`` is the human-chosen external id (e.g. ``23-01-002``);
    ``id`` is the internal key that registrations and attendance reference.
    """

    id: int
    student_number: str
    name: str
    email: Optional[str] = None
    card_uid: Optional[str] = None

    @property
    def has_card(self) -> bool:
        return self.card_uid is not None


@dataclass(frozen=True)
class NewStudent:
    student_number: str
    name: str
    email: Optional[str] = None

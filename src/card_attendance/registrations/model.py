from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.constants import MAX_REPORTED_IMPORT_ERRORS


@dataclass(frozen=True)
class ImportRowError:
    line: int
    student_id: str
    error: str

    def to_dict(self) -> dict:
        return {"line": self.line, "student_id": self.student_id, "error": self.error}


@dataclass
class RegistrationImportReport:
    success: int = 0
    skipped: int = 0
    errors: list[ImportRowError] = field(default_factory=list)
    event_name: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        data = {
            "success": self.success,
            "skipped": self.skipped,
            "errors": [e.to_dict() for e in self.errors[:MAX_REPORTED_IMPORT_ERRORS]],
            "totalErrors": len(self.errors),
        }
        if self.event_name is not None:
            data["eventName"] = self.event_name
        return data


@dataclass(frozen=True)
class OfflineRegistration:
    """Read-model for field devices validating taps without a round trip."""

    student_pk: int
    student_number: str
    name: str
    card_uid: str

    def to_dict(self) -> dict:
        return {
            "studentId": self.student_pk,
            "studentNumber": self.student_number,
            "name": self.name,
            "cardUid": self.card_uid,
        }

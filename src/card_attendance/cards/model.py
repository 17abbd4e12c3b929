from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.enums import DetectionStatus
from ..students.model import Student


@dataclass(frozen=True)
class PendingCard:
    """A card a field device has seen that is not bound to any student yet."""

    uid: str
    device_id: str
    detected_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    def to_dict(self) -> dict:
        return {
            "uid": self.uid,
            "deviceId": self.device_id,
            "detectedAt": to_iso(self.detected_at),
            "expiresAt": to_iso(self.expires_at),
        }


@dataclass(frozen=True)
class DetectionResult:
    uid: str
    status: DetectionStatus
    student: Optional[Student] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict = {"uid": self.uid, "status": self.status.value}
        if self.error:
            data["error"] = self.error
        if self.student:
            data["student"] = {"name": self.student.name, "studentId": self.student.student_number}
        return data


@dataclass
class BatchDetectionReport:
    """Per-item outcomes of a batch report plus aggregate counts."""

    results: list[DetectionResult] = field(default_factory=list)

    def _count(self, status: DetectionStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def created(self) -> int:
        return self._count(DetectionStatus.CREATED)

    @property
    def duplicates(self) -> int:
        return self._count(DetectionStatus.DUPLICATE)

    @property
    def failed(self) -> int:
        return self._count(DetectionStatus.FAILED)

    def to_dict(self) -> dict:
        return {
            "success": self.created,
            "duplicates": self.duplicates,
            "failed": self.failed,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass(frozen=True)
class CardStatus:
    activated: bool
    student_name: Optional[str] = None
    student_number: Optional[str] = None

    def to_dict(self) -> dict:
        if not self.activated:
            return {"activated": False}
        return {"activated": True, "studentName": self.student_name, "studentId": self.student_number}


@dataclass(frozen=True)
class ActivationResult:
    student: Student
    card_uid: str

    def to_dict(self) -> dict:
        return {
            "success": True,
            "name": self.student.name,
            "studentId": self.student.student_number,
            "cardUid": self.card_uid,
        }

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Sequence

from ..common.datetime_utils import now_utc
from ..common.validators import normalize_card_uid, require_non_empty
from ..core.constants import MAX_CARDS_PER_BATCH, PENDING_CARD_TTL_MINUTES, UNKNOWN_DEVICE_ID
from ..core.enums import DetectionStatus, PendingCardChange
from ..core.exceptions import ConflictError, DuplicateEntryError, NotFoundError, ValidationError
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import ActivationResult, BatchDetectionReport, CardStatus, DetectionResult, PendingCard
from .repository import PendingCardRepository

logger = logging.getLogger(__name__)

PendingCardListener = Callable[[PendingCardChange, str], None]


def _device_label(device_id: object) -> str:
    # Devices may send numeric ids; anything present is stored as text.
    if device_id is None:
        return UNKNOWN_DEVICE_ID
    return str(device_id).strip() or UNKNOWN_DEVICE_ID


class CardRegistryService:
    """Card lifecycle per UID: unseen -> pending (tap) -> bound (activation).

    Pending rows expire passively: every read filters on ``expires_at`` and
    ``cleanup_expired`` is an on-demand sweep, there is no background timer.
    """

    def __init__(
        self,
        students: StudentRepository,
        pending_cards: PendingCardRepository,
        *,
        ttl_minutes: int = PENDING_CARD_TTL_MINUTES,
        max_batch: int = MAX_CARDS_PER_BATCH,
    ):
        self._students = students
        self._pending = pending_cards
        self._ttl = timedelta(minutes=int(ttl_minutes))
        self._max_batch = int(max_batch)
        self._listeners: list[PendingCardListener] = []

    def subscribe(self, listener: PendingCardListener) -> None:
        """Register a callback for pending-set changes (live admin views)."""
        self._listeners.append(listener)

    def _notify(self, change: PendingCardChange, uid: str) -> None:
        for listener in self._listeners:
            try:
                listener(change, uid)
            except Exception:
                logger.exception("Pending card listener failed for %s %s", change.value, uid)

    def report_detection(self, uid: object, device_id: object = None, *, now: datetime | None = None) -> DetectionResult:
        card_uid = normalize_card_uid(uid)
        now = now or now_utc()

        owner = self._students.get_by_card_uid(card_uid)
        if owner:
            return DetectionResult(uid=card_uid, status=DetectionStatus.DUPLICATE, student=owner)

        self._pending.upsert(
            uid=card_uid,
            device_id=_device_label(device_id),
            detected_at=now,
            expires_at=now + self._ttl,
        )
        self._notify(PendingCardChange.INSERT, card_uid)
        return DetectionResult(uid=card_uid, status=DetectionStatus.CREATED)

    def report_batch(self, cards: object, device_id: object = None, *, now: datetime | None = None) -> BatchDetectionReport:
        if not isinstance(cards, list) or not cards:
            raise ValidationError("Cards array is required and must not be empty")
        if len(cards) > self._max_batch:
            raise ValidationError(f"Maximum {self._max_batch} cards per batch")

        now = now or now_utc()
        report = BatchDetectionReport()
        for item in cards:
            raw_uid = item.get("uid") if isinstance(item, dict) else None
            shown_uid = raw_uid if isinstance(raw_uid, str) and raw_uid else "unknown"
            try:
                report.results.append(self.report_detection(raw_uid, device_id, now=now))
            except ValidationError as e:
                report.results.append(DetectionResult(uid=shown_uid, status=DetectionStatus.FAILED, error=str(e)))
            except Exception:
                logger.exception("Batch detection failed for uid=%s", shown_uid)
                report.results.append(
                    DetectionResult(uid=shown_uid.upper(), status=DetectionStatus.FAILED, error="Failed to register card detection")
                )

        logger.info(
            "Batch detection: total=%d created=%d duplicates=%d failed=%d device=%s",
            len(cards),
            report.created,
            report.duplicates,
            report.failed,
            _device_label(device_id),
        )
        return report

    def list_pending(self, *, now: datetime | None = None) -> Sequence[PendingCard]:
        return self._pending.list_unexpired(now=now or now_utc())

    def activate(self, *, student_number: object, card_uid: object) -> ActivationResult:
        """Bind ``card_uid`` to the student, then drop the pending row (best effort)."""
        if not student_number or not card_uid:
            raise ValidationError("Student ID and card UID are required")
        number = require_non_empty(str(student_number), "Student ID")
        uid = normalize_card_uid(card_uid)

        student = self._students.get_by_student_number(number)
        if not student:
            raise NotFoundError("Student ID not found in database")
        if student.has_card:
            raise ConflictError("Student already has a card assigned")

        owner = self._students.get_by_card_uid(uid)
        if owner and owner.id != student.id:
            raise self._card_taken(owner)

        try:
            bound = self._students.bind_card(student_pk=student.id, card_uid=uid)
        except DuplicateEntryError:
            # Another activation bound this card between our read and our write.
            owner = self._students.get_by_card_uid(uid)
            if owner:
                raise self._card_taken(owner)
            raise ConflictError("Card already assigned to another student")
        if not bound:
            raise ConflictError("Student already has a card assigned")

        logger.info("Card %s bound to student %s", uid, student.student_number)
        self._remove_pending_after_activation(uid)
        return ActivationResult(student=student, card_uid=uid)

    @staticmethod
    def _card_taken(owner: Student) -> ConflictError:
        return ConflictError(f"Card already assigned to {owner.name} ({owner.student_number})")

    def _remove_pending_after_activation(self, uid: str) -> None:
        try:
            removed = self._pending.delete(uid)
        except Exception:
            # Binding is the source of truth; a stale pending row just expires.
            logger.warning("Pending card cleanup failed after activation of %s", uid, exc_info=True)
            return
        if removed:
            self._notify(PendingCardChange.DELETE, uid)

    def resolve_status(self, uid: object) -> CardStatus:
        card_uid = normalize_card_uid(uid)
        student = self._students.get_by_card_uid(card_uid)
        if not student:
            return CardStatus(activated=False)
        return CardStatus(activated=True, student_name=student.name, student_number=student.student_number)

    def cleanup_expired(self, *, now: datetime | None = None) -> int:
        removed = self._pending.delete_expired(now=now or now_utc())
        for uid in removed:
            self._notify(PendingCardChange.DELETE, uid)
        if removed:
            logger.info("Removed %d expired pending cards", len(removed))
        return len(removed)

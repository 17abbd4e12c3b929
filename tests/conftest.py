from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from card_attendance.admins.model import Admin
from card_attendance.attendance.model import Attendee
from card_attendance.cards.model import PendingCard
from card_attendance.container import assemble
from card_attendance.core.constants import DEVICE_API_KEY_HEADER
from card_attendance.core.enums import EventStatus
from card_attendance.core.exceptions import DuplicateEntryError
from card_attendance.events.model import Event, EventDraft
from card_attendance.main import create_app
from card_attendance.registrations.model import OfflineRegistration
from card_attendance.students.model import NewStudent, Student

DEVICE_KEY = "test-device-key"
ADMIN_PASSWORD = "s3cret"


class InMemoryStudents:
    """Honors the unique keys on student_number and card_uid like the real table."""

    def __init__(self, students: list[Student] | None = None):
        self._by_id: dict[int, Student] = {}
        self._id = 0
        for s in students or []:
            self._by_id[s.id] = s
            self._id = max(self._id, s.id)

    def add(self, student_number: str, name: str, *, email: str | None = None, card_uid: str | None = None) -> Student:
        self._id += 1
        s = Student(id=self._id, student_number=student_number, name=name, email=email, card_uid=card_uid)
        self._by_id[s.id] = s
        return s

    def get_by_id(self, student_pk: int) -> Optional[Student]:
        return self._by_id.get(student_pk)

    def get_by_student_number(self, student_number: str) -> Optional[Student]:
        return next((s for s in self._by_id.values() if s.student_number == student_number), None)

    def get_by_card_uid(self, card_uid: str) -> Optional[Student]:
        return next((s for s in self._by_id.values() if s.card_uid == card_uid), None)

    def find_by_student_numbers(self, student_numbers):
        wanted = set(student_numbers)
        return [s for s in self._by_id.values() if s.student_number in wanted]

    def bind_card(self, *, student_pk: int, card_uid: str) -> bool:
        if any(s.card_uid == card_uid for s in self._by_id.values()):
            raise DuplicateEntryError("Duplicate entry for card_uid")
        student = self._by_id.get(student_pk)
        if not student or student.card_uid is not None:
            return False
        self._by_id[student_pk] = replace(student, card_uid=card_uid)
        return True

    def create_many(self, students: list[NewStudent]) -> int:
        for n in students:
            if self.get_by_student_number(n.student_number):
                raise DuplicateEntryError("Duplicate entry for student_id")
        for n in students:
            self.add(n.student_number, n.name, email=n.email)
        return len(students)


class InMemoryPendingCards:
    def __init__(self):
        self.rows: dict[str, PendingCard] = {}

    def upsert(self, *, uid: str, device_id: str, detected_at: datetime, expires_at: datetime) -> None:
        self.rows[uid] = PendingCard(uid=uid, device_id=device_id, detected_at=detected_at, expires_at=expires_at)

    def list_unexpired(self, *, now: datetime):
        live = [p for p in self.rows.values() if not p.is_expired(now)]
        return sorted(live, key=lambda p: p.detected_at, reverse=True)

    def delete(self, uid: str) -> bool:
        return self.rows.pop(uid, None) is not None

    def delete_expired(self, *, now: datetime):
        expired = [uid for uid, p in self.rows.items() if p.is_expired(now)]
        for uid in expired:
            del self.rows[uid]
        return expired


class InMemoryEvents:
    """Completes other active events on activation and rejects a second active row."""

    def __init__(self):
        self.rows: dict[int, Event] = {}
        self._id = 0

    def _live(self):
        return [e for e in self.rows.values() if e.deleted_at is None]

    def _complete_other_active(self, keep_id: int | None = None) -> None:
        for e in self._live():
            if e.status == EventStatus.ACTIVE and e.id != keep_id:
                self.rows[e.id] = replace(e, status=EventStatus.COMPLETED)

    def _check_single_active(self, event: Event) -> None:
        if event.status == EventStatus.ACTIVE and any(
            e.status == EventStatus.ACTIVE and e.id != event.id for e in self._live()
        ):
            raise DuplicateEntryError("Duplicate entry for uq_events_single_active")

    def get(self, event_id: int) -> Optional[Event]:
        e = self.rows.get(event_id)
        return e if e and e.deleted_at is None else None

    def list(self, *, status: EventStatus | None = None):
        items = [e for e in self._live() if status is None or e.status == status]
        return sorted(items, key=lambda e: e.start_time, reverse=True)

    def list_active(self, *, limit: int = 2):
        return sorted((e for e in self._live() if e.status == EventStatus.ACTIVE), key=lambda e: e.id)[:limit]

    def create(self, draft: EventDraft, *, created_by: str | None = None) -> Event:
        if draft.status == EventStatus.ACTIVE:
            self._complete_other_active()
        self._id += 1
        event = Event(
            id=self._id,
            name=draft.name,
            description=draft.description,
            start_time=draft.start_time,
            end_time=draft.end_time,
            status=draft.status,
            created_at=datetime(2025, 1, 1),
        )
        self.rows[event.id] = event
        return event

    def update(self, event_id: int, draft: EventDraft) -> Optional[Event]:
        current = self.get(event_id)
        if not current:
            return None
        if draft.status == EventStatus.ACTIVE:
            self._complete_other_active(keep_id=event_id)
        self.rows[event_id] = replace(
            current,
            name=draft.name,
            description=draft.description,
            start_time=draft.start_time,
            end_time=draft.end_time,
            status=draft.status,
        )
        return self.rows[event_id]

    def activate(self, event_id: int) -> Optional[Event]:
        current = self.get(event_id)
        if not current:
            return None
        self._complete_other_active(keep_id=event_id)
        self.rows[event_id] = replace(current, status=EventStatus.ACTIVE)
        return self.rows[event_id]

    def set_status(self, event_id: int, status: EventStatus) -> Optional[Event]:
        current = self.get(event_id)
        if not current:
            return None
        updated = replace(current, status=status)
        self._check_single_active(updated)
        self.rows[event_id] = updated
        return updated

    def soft_delete(self, event_id: int, *, deleted_at: datetime) -> bool:
        current = self.get(event_id)
        if not current:
            return False
        self.rows[event_id] = replace(current, deleted_at=deleted_at)
        return True


class InMemoryRegistrations:
    def __init__(self, students: InMemoryStudents):
        self._students = students
        self.pairs: dict[tuple[int, int], datetime] = {}

    def insert_ignoring_duplicates(self, pairs, *, registered_at: datetime) -> int:
        inserted = 0
        for pair in pairs:
            if pair not in self.pairs:
                self.pairs[pair] = registered_at
                inserted += 1
        return inserted

    def exists(self, *, student_pk: int, event_id: int) -> bool:
        return (student_pk, event_id) in self.pairs

    def count_for_event(self, event_id: int) -> int:
        return sum(1 for (_, e) in self.pairs if e == event_id)

    def list_with_cards(self, event_id: int):
        out = []
        for (student_pk, e) in self.pairs:
            s = self._students.get_by_id(student_pk)
            if e == event_id and s and s.card_uid:
                out.append(OfflineRegistration(student_pk=s.id, student_number=s.student_number, name=s.name, card_uid=s.card_uid))
        return out


class InMemoryAttendance:
    def __init__(self, students: InMemoryStudents):
        self._students = students
        self.rows: dict[tuple[int, int], datetime] = {}

    def exists(self, *, student_pk: int, event_id: int) -> bool:
        return (student_pk, event_id) in self.rows

    def create(self, *, student_pk: int, event_id: int, checked_in_at: datetime) -> int:
        if (student_pk, event_id) in self.rows:
            raise DuplicateEntryError("Duplicate entry for uq_attendance")
        self.rows[(student_pk, event_id)] = checked_in_at
        return len(self.rows)

    def count_for_event(self, event_id: int) -> int:
        return sum(1 for (_, e) in self.rows if e == event_id)

    def list_attendees(self, event_id: int):
        out = []
        for (student_pk, e), at in sorted(self.rows.items(), key=lambda kv: kv[1]):
            s = self._students.get_by_id(student_pk)
            if e == event_id and s:
                out.append(Attendee(student_number=s.student_number, name=s.name, email=s.email, checked_in_at=at))
        return out


class InMemoryAdmins:
    def __init__(self, admins: list[Admin]):
        self._by_admin_id = {a.admin_id: a for a in admins}

    def get_by_admin_id(self, admin_id: str) -> Optional[Admin]:
        return self._by_admin_id.get(admin_id)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 10, 9, 0, 0)


@pytest.fixture
def students() -> InMemoryStudents:
    return InMemoryStudents()


@pytest.fixture
def pending_cards() -> InMemoryPendingCards:
    return InMemoryPendingCards()


@pytest.fixture
def events() -> InMemoryEvents:
    return InMemoryEvents()


@pytest.fixture
def registrations(students) -> InMemoryRegistrations:
    return InMemoryRegistrations(students)


@pytest.fixture
def attendance(students) -> InMemoryAttendance:
    return InMemoryAttendance(students)


@pytest.fixture
def admins() -> InMemoryAdmins:
    return InMemoryAdmins(
        [Admin(admin_pk=1, admin_id="admin", name="Admin Demo", password_hash=generate_password_hash(ADMIN_PASSWORD))]
    )


@pytest.fixture
def container(admins, students, pending_cards, events, registrations, attendance):
    return assemble(
        admins_repo=admins,
        students_repo=students,
        pending_cards_repo=pending_cards,
        events_repo=events,
        registrations_repo=registrations,
        attendance_repo=attendance,
        device_api_key=DEVICE_KEY,
    )


@pytest.fixture
def app(container):
    return create_app(container, settings_module="card_attendance.config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def device_headers() -> dict:
    return {DEVICE_API_KEY_HEADER: DEVICE_KEY}


@pytest.fixture
def admin_client(client):
    resp = client.post("/api/admin/login", json={"adminId": "admin", "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return client


@pytest.fixture
def make_event(events):
    def _make(name: str = "Orientation", status: EventStatus = EventStatus.UPCOMING, *, start: datetime | None = None) -> Event:
        start = start or datetime(2025, 3, 10, 8, 0)
        return events.create(
            EventDraft(name=name, description=None, start_time=start, end_time=start + timedelta(hours=2), status=status)
        )

    return _make

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from card_attendance.core.enums import EventStatus
from card_attendance.core.exceptions import ConflictError, DuplicateEntryError, InvariantViolationError, NotFoundError, ValidationError
from card_attendance.events.service import EventService, parse_event_draft


@pytest.fixture
def svc(events) -> EventService:
    return EventService(events)


def _payload(**overrides) -> dict:
    data = {
        "name": "Orientation",
        "description": "Freshman day",
        "start_time": "2025-03-10T08:00:00Z",
        "end_time": "2025-03-10T10:00:00Z",
        "status": "upcoming",
    }
    data.update(overrides)
    return data


def _active_ids(events) -> list[int]:
    return [e.id for e in events.list(status=EventStatus.ACTIVE)]


def test_parse_draft_accepts_camel_case_and_normalizes_utc():
    draft = parse_event_draft(
        {"name": " Gala ", "startTime": "2025-03-10T10:00:00+02:00", "endTime": "2025-03-10T12:00:00+02:00", "status": "active"}
    )

    assert draft.name == "Gala"
    assert draft.start_time == datetime(2025, 3, 10, 8, 0)
    assert draft.status == EventStatus.ACTIVE
    assert draft.description is None


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"name": ""}, "Missing required fields"),
        ({"status": None}, "Missing required fields"),
        ({"status": "paused"}, "Invalid status"),
        ({"end_time": "2025-03-10T08:00:00Z"}, "Start time must be before end time"),
        ({"start_time": "yesterday"}, "ISO 8601"),
    ],
)
def test_parse_draft_rejects_invalid_payload(overrides, message):
    with pytest.raises(ValidationError, match=message):
        parse_event_draft(_payload(**overrides))


def test_create_and_get(svc):
    event = svc.create_event(_payload(), created_by="admin")

    assert svc.get_event(event.id) == event
    assert event.to_dict()["startTime"] == "2025-03-10T08:00:00Z"


def test_create_active_completes_previous_active(svc, events):
    first = svc.create_event(_payload(status="active"))
    second = svc.create_event(_payload(name="Second", status="active"))

    assert _active_ids(events) == [second.id]
    assert events.get(first.id).status == EventStatus.COMPLETED


def test_activate_completes_others(svc, events):
    a = svc.create_event(_payload(status="active"))
    b = svc.create_event(_payload(name="B"))

    activated = svc.activate(b.id)

    assert activated.status == EventStatus.ACTIVE
    assert _active_ids(events) == [b.id]
    assert events.get(a.id).status == EventStatus.COMPLETED


def test_update_to_active_completes_others(svc, events):
    a = svc.create_event(_payload(status="active"))
    b = svc.create_event(_payload(name="B"))

    svc.update_event(b.id, _payload(name="B", status="active"))

    assert _active_ids(events) == [b.id]
    assert events.get(a.id).status == EventStatus.COMPLETED


def test_reactivating_completed_event_is_allowed(svc, events):
    a = svc.create_event(_payload(status="active"))
    svc.end(a.id)

    assert svc.activate(a.id).status == EventStatus.ACTIVE


def test_end_and_list_by_status(svc):
    a = svc.create_event(_payload(status="active"))
    svc.create_event(_payload(name="Later"))

    svc.end(a.id)

    assert [e.id for e in svc.list_events(status="completed")] == [a.id]
    assert svc.current_active() is None
    with pytest.raises(ValidationError):
        svc.list_events(status="bogus")


def test_delete_hides_event_everywhere(svc, fixed_now):
    a = svc.create_event(_payload(status="active"))

    svc.delete(a.id, now=fixed_now)

    assert svc.current_active() is None
    assert svc.list_events() == []
    with pytest.raises(NotFoundError):
        svc.get_event(a.id)
    with pytest.raises(NotFoundError):
        svc.delete(a.id, now=fixed_now)


@pytest.mark.parametrize("operation", ["activate", "end", "get_event"])
def test_missing_event_is_not_found(svc, operation):
    with pytest.raises(NotFoundError):
        getattr(svc, operation)(404)


def test_update_missing_event_is_not_found(svc):
    with pytest.raises(NotFoundError):
        svc.update_event(404, _payload())


def test_current_active_reports_corrupted_state(svc, events):
    a = svc.create_event(_payload(status="active"))
    b = svc.create_event(_payload(name="B"))
    # Bypass the repository to simulate a store without the single-active key.
    events.rows[b.id] = replace(events.rows[b.id], status=EventStatus.ACTIVE)
    assert {a.id, b.id} == set(_active_ids(events))

    with pytest.raises(InvariantViolationError, match="Multiple active events"):
        svc.current_active()


def test_store_rejection_of_second_active_maps_to_conflict(events):
    class RacingEvents:
        def __getattr__(self, name):
            return getattr(events, name)

        def activate(self, event_id):
            raise DuplicateEntryError("Duplicate entry '1' for key 'uq_events_single_active'")

    svc = EventService(RacingEvents())
    event = svc.create_event(_payload())

    with pytest.raises(ConflictError, match="retry"):
        svc.activate(event.id)


def test_at_most_one_active_after_any_sequence(svc, events):
    ids = [svc.create_event(_payload(name=f"E{i}")).id for i in range(4)]
    for event_id in [ids[0], ids[2], ids[1], ids[2], ids[3]]:
        svc.activate(event_id)
        assert len(_active_ids(events)) == 1
    svc.update_event(ids[0], _payload(name="E0", status="active"))
    svc.create_event(_payload(name="E5", status="active"))

    assert len(_active_ids(events)) == 1

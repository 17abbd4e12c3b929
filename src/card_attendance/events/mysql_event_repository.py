from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import EventStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Event, EventDraft
from .repository import EventRepository

_COLUMNS = "id, name, description, start_time, end_time, status, created_at, deleted_at"


def _to_event(r: dict) -> Event:
    return Event(
        id=int(r["id"]),
        name=r["name"],
        description=r.get("description"),
        start_time=r["start_time"],
        end_time=r["end_time"],
        status=EventStatus(r["status"]),
        created_at=r.get("created_at"),
        deleted_at=r.get("deleted_at"),
    )


def _select_live(cur, event_id: int, *, for_update: bool = False) -> Optional[Event]:
    lock = " FOR UPDATE" if for_update else ""
    cur.execute(f"SELECT {_COLUMNS} FROM events WHERE id=%s AND deleted_at IS NULL{lock}", (int(event_id),))
    r = fetchone(cur)
    return _to_event(r) if r else None


def _complete_other_active(cur, *, keep_id: Optional[int] = None) -> None:
    if keep_id is None:
        cur.execute("UPDATE events SET status='completed' WHERE status='active' AND deleted_at IS NULL")
    else:
        cur.execute(
            "UPDATE events SET status='completed' WHERE status='active' AND deleted_at IS NULL AND id<>%s",
            (int(keep_id),),
        )


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, event_id: int) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            return _select_live(cur, event_id)

    def list(self, *, status: Optional[EventStatus] = None) -> Sequence[Event]:
        clauses = ["deleted_at IS NULL"]
        params: list[object] = []
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM events WHERE {' AND '.join(clauses)} ORDER BY start_time DESC",
                tuple(params),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def list_active(self, *, limit: int = 2) -> Sequence[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM events
                WHERE status='active' AND deleted_at IS NULL
                ORDER BY id
                LIMIT %s
                """,
                (int(limit),),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def create(self, draft: EventDraft, *, created_by: Optional[str] = None) -> Event:
        with db_cursor(self._conn_factory) as (_, cur):
            if draft.status == EventStatus.ACTIVE:
                _complete_other_active(cur)
            cur.execute(
                """
                INSERT INTO events (name, description, start_time, end_time, status, created_by)
                VALUES (%s, %s, %s, %s, %s, %s)
                """,
                (draft.name, draft.description, draft.start_time, draft.end_time, draft.status.value, created_by),
            )
            event = _select_live(cur, int(cur.lastrowid))
            if event is None:
                raise RuntimeError("Inserted event could not be read back")
            return event

    def update(self, event_id: int, draft: EventDraft) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            if not _select_live(cur, event_id, for_update=True):
                return None
            if draft.status == EventStatus.ACTIVE:
                _complete_other_active(cur, keep_id=event_id)
            cur.execute(
                """
                UPDATE events
                SET name=%s, description=%s, start_time=%s, end_time=%s, status=%s
                WHERE id=%s AND deleted_at IS NULL
                """,
                (draft.name, draft.description, draft.start_time, draft.end_time, draft.status.value, int(event_id)),
            )
            return _select_live(cur, event_id)

    def activate(self, event_id: int) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            if not _select_live(cur, event_id, for_update=True):
                return None
            _complete_other_active(cur, keep_id=event_id)
            cur.execute(
                "UPDATE events SET status='active' WHERE id=%s AND deleted_at IS NULL",
                (int(event_id),),
            )
            return _select_live(cur, event_id)

    def set_status(self, event_id: int, status: EventStatus) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE events SET status=%s WHERE id=%s AND deleted_at IS NULL",
                (status.value, int(event_id)),
            )
            return _select_live(cur, event_id)

    def soft_delete(self, event_id: int, *, deleted_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE events SET deleted_at=%s WHERE id=%s AND deleted_at IS NULL",
                (deleted_at, int(event_id)),
            )
            return cur.rowcount > 0

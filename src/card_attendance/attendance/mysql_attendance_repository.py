from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Attendee
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists(self, *, student_pk: int, event_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM attendance WHERE student_id=%s AND event_id=%s",
                (int(student_pk), int(event_id)),
            )
            return fetchone(cur) is not None

    def create(self, *, student_pk: int, event_id: int, checked_in_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO attendance (student_id, event_id, checked_in_at) VALUES (%s, %s, %s)",
                (int(student_pk), int(event_id), checked_in_at),
            )
            return int(cur.lastrowid)

    def count_for_event(self, event_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM attendance WHERE event_id=%s", (int(event_id),))
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def list_attendees(self, event_id: int) -> Sequence[Attendee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.student_id, s.name, s.email, a.checked_in_at
                FROM attendance a
                JOIN students s ON s.id = a.student_id
                WHERE a.event_id=%s
                ORDER BY a.checked_in_at ASC, a.id ASC
                """,
                (int(event_id),),
            )
            return [
                Attendee(
                    student_number=r["student_id"],
                    name=r["name"],
                    email=r.get("email"),
                    checked_in_at=r["checked_in_at"],
                )
                for r in fetchall(cur)
            ]

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import OfflineRegistration
from .repository import RegistrationRepository


class MySQLRegistrationRepository(RegistrationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert_ignoring_duplicates(self, pairs: Sequence[tuple[int, int]], *, registered_at: datetime) -> int:
        if not pairs:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                "INSERT IGNORE INTO registrations (student_id, event_id, registered_at) VALUES (%s, %s, %s)",
                [(int(s), int(e), registered_at) for s, e in pairs],
            )
            return max(int(cur.rowcount), 0)

    def exists(self, *, student_pk: int, event_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM registrations WHERE student_id=%s AND event_id=%s",
                (int(student_pk), int(event_id)),
            )
            return fetchone(cur) is not None

    def count_for_event(self, event_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM registrations WHERE event_id=%s", (int(event_id),))
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def list_with_cards(self, event_id: int) -> Sequence[OfflineRegistration]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.student_id, s.name, s.card_uid
                FROM registrations r
                JOIN students s ON s.id = r.student_id
                WHERE r.event_id=%s AND s.card_uid IS NOT NULL
                ORDER BY s.student_id
                """,
                (int(event_id),),
            )
            return [
                OfflineRegistration(
                    student_pk=int(r["id"]),
                    student_number=r["student_id"],
                    name=r["name"],
                    card_uid=r["card_uid"],
                )
                for r in fetchall(cur)
            ]

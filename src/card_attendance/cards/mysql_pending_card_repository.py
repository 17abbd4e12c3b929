from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .model import PendingCard
from .repository import PendingCardRepository


class MySQLPendingCardRepository(PendingCardRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, *, uid: str, device_id: str, detected_at: datetime, expires_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO pending_cards (uid, device_id, detected_at, expires_at)
                VALUES (%s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE
                    device_id=VALUES(device_id),
                    detected_at=VALUES(detected_at),
                    expires_at=VALUES(expires_at)
                """,
                (uid, device_id, detected_at, expires_at),
            )

    def list_unexpired(self, *, now: datetime) -> Sequence[PendingCard]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT uid, device_id, detected_at, expires_at
                FROM pending_cards
                WHERE expires_at > %s
                ORDER BY detected_at DESC
                """,
                (now,),
            )
            return [
                PendingCard(
                    uid=r["uid"],
                    device_id=r["device_id"],
                    detected_at=r["detected_at"],
                    expires_at=r["expires_at"],
                )
                for r in fetchall(cur)
            ]

    def delete(self, uid: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM pending_cards WHERE uid=%s", (uid,))
            return cur.rowcount > 0

    def delete_expired(self, *, now: datetime) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT uid FROM pending_cards WHERE expires_at <= %s FOR UPDATE", (now,))
            uids = [r["uid"] for r in fetchall(cur)]
            if uids:
                cur.execute(f"DELETE FROM pending_cards WHERE uid IN ({in_clause(uids)})", tuple(uids))
            return uids

from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Admin
from .repository import AdminRepository


class MySQLAdminRepository(AdminRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_admin_id(self, admin_id: str) -> Optional[Admin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT admin_pk, admin_id, name, password_hash FROM admins WHERE admin_id=%s",
                (admin_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Admin(
                admin_pk=int(r["admin_pk"]),
                admin_id=r["admin_id"],
                name=r["name"],
                password_hash=r["password_hash"],
            )

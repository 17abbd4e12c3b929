from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import NewStudent, Student
from .repository import StudentRepository

_COLUMNS = "id, student_id, name, email, card_uid"


def _to_student(r: dict) -> Student:
    return Student(
        id=int(r["id"]),
        student_number=r["student_id"],
        name=r["name"],
        email=r.get("email"),
        card_uid=r.get("card_uid"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_where(self, clause: str, value) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE {clause}", (value,))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def get_by_id(self, student_pk: int) -> Optional[Student]:
        return self._get_where("id=%s", int(student_pk))

    def get_by_student_number(self, student_number: str) -> Optional[Student]:
        return self._get_where("student_id=%s", student_number)

    def get_by_card_uid(self, card_uid: str) -> Optional[Student]:
        return self._get_where("card_uid=%s", card_uid)

    def find_by_student_numbers(self, student_numbers: Sequence[str]) -> Sequence[Student]:
        numbers = list(dict.fromkeys(student_numbers))
        if not numbers:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE student_id IN ({in_clause(numbers)})",
                tuple(numbers),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def bind_card(self, *, student_pk: int, card_uid: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE students SET card_uid=%s WHERE id=%s AND card_uid IS NULL",
                (card_uid, int(student_pk)),
            )
            return cur.rowcount > 0

    def create_many(self, students: Sequence[NewStudent]) -> int:
        if not students:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                "INSERT INTO students (student_id, name, email) VALUES (%s, %s, %s)",
                [(s.student_number, s.name, s.email) for s in students],
            )
            return int(cur.rowcount)

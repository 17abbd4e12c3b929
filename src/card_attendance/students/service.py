from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..common.csv_utils import parse_csv_upload
from ..common.validators import is_valid_email
from ..core.constants import MAX_STUDENTS_PER_IMPORT
from ..core.exceptions import ValidationError
from .model import NewStudent
from .repository import StudentRepository

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("student_id", "name")


@dataclass
class RosterImportReport:
    success: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"success": self.success, "skipped": self.skipped, "errors": self.errors}


class StudentImportService:
    """Use case: load the student roster (identity data for card binding) from CSV."""

    def __init__(self, students: StudentRepository, *, max_rows: int = MAX_STUDENTS_PER_IMPORT):
        self._students = students
        self._max_rows = int(max_rows)

    def import_roster(self, content: bytes | str) -> RosterImportReport:
        parsed = parse_csv_upload(content)

        missing = [c for c in REQUIRED_COLUMNS if c not in parsed.headers]
        if missing:
            raise ValidationError(f"Missing required columns: {', '.join(missing)}")
        duplicated = sorted({h for h in parsed.headers if parsed.headers.count(h) > 1})
        if duplicated:
            raise ValidationError(f"Duplicate column names found: {', '.join(duplicated)}")

        if not parsed.rows:
            raise ValidationError("CSV file is empty")
        if len(parsed.rows) > self._max_rows:
            raise ValidationError(f"Maximum {self._max_rows} students per upload")

        report = RosterImportReport()
        candidates: list[tuple[int, NewStudent]] = []
        seen: set[str] = set()

        for line, row in zip(parsed.line_numbers, parsed.rows):
            number = (row.get("student_id") or "").strip()
            name = (row.get("name") or "").strip()
            email = (row.get("email") or "").strip() or None

            if not number or not name:
                report.errors.append(f"Line {line}: Missing required fields (student_id, name)")
                continue
            if email and not is_valid_email(email):
                report.errors.append(f"Line {line}: Invalid email format")
                continue
            if number in seen:
                report.errors.append(f"Line {line}: Student ID '{number}' appears more than once")
                continue
            seen.add(number)
            candidates.append((line, NewStudent(student_number=number, name=name, email=email)))

        if not candidates:
            raise ValidationError("No valid rows in CSV file")

        existing = {s.student_number for s in self._students.find_by_student_numbers([c.student_number for _, c in candidates])}
        new_rows = []
        for line, candidate in candidates:
            if candidate.student_number in existing:
                report.skipped += 1
                report.errors.append(f"Line {line}: Student ID '{candidate.student_number}' already exists")
            else:
                new_rows.append(candidate)

        if new_rows:
            report.success = self._students.create_many(new_rows)

        logger.info("Roster import: %d added, %d skipped, %d errors", report.success, report.skipped, len(report.errors))
        return report

from __future__ import annotations

import pytest

from card_attendance.core.exceptions import ValidationError
from card_attendance.students.service import StudentImportService


def test_roster_import_adds_new_and_skips_existing(students):
    students.add("23-01-001", "Existing")
    content = b"student_id,name,email\n23-01-001,Existing,\n23-01-002,Lan,lan@example.edu\n23-01-003,Minh,\n"

    report = StudentImportService(students).import_roster(content)

    assert (report.success, report.skipped) == (2, 1)
    assert report.errors == ["Line 2: Student ID '23-01-001' already exists"]
    assert students.get_by_student_number("23-01-002").email == "lan@example.edu"
    assert students.get_by_student_number("23-01-003").card_uid is None


def test_roster_import_reports_bad_rows(students):
    content = b"student_id,name,email\n23-01-001,,\n23-01-002,Lan,not-an-email\n23-01-003,Minh,\n23-01-003,Minh again,\n"

    report = StudentImportService(students).import_roster(content)

    assert report.success == 1
    assert report.errors == [
        "Line 2: Missing required fields (student_id, name)",
        "Line 3: Invalid email format",
        "Line 5: Student ID '23-01-003' appears more than once",
    ]


@pytest.mark.parametrize(
    "content, message",
    [
        (b"student_id\n23-01-001\n", "Missing required columns: name"),
        (b"student_id,name,name\n1,a,b\n", "Duplicate column names"),
        (b"student_id,name\n", "CSV file is empty"),
        (b"student_id,name\n,\n1,\n", "No valid rows"),
    ],
)
def test_roster_import_rejects_file(students, content, message):
    with pytest.raises(ValidationError, match=message):
        StudentImportService(students).import_roster(content)


def test_roster_import_row_limit(students):
    rows = "\n".join(f"{i},Name {i}" for i in range(3))
    with pytest.raises(ValidationError, match="Maximum 2"):
        StudentImportService(students, max_rows=2).import_roster(f"student_id,name\n{rows}\n")


def test_roster_error_lines_count_skipped_blank_lines(students):
    report = StudentImportService(students).import_roster(b"student_id,name\n23-01-001,Lan\n\n23-01-002,\n")

    assert report.errors == ["Line 4: Missing required fields (student_id, name)"]

from __future__ import annotations

import csv
import io
from dataclasses import dataclass

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ParsedCsv:
    headers: list[str]
    rows: list[dict[str, str]]
    # Physical line of each row in the upload (header is line 1).
    line_numbers: list[int]


def parse_csv_upload(content: bytes | str) -> ParsedCsv:
    """Parse an uploaded CSV with a header row.

    Header names are trimmed and lower-cased, fully empty lines are skipped and
    extra columns are kept as-is (callers ignore what they do not need).
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError:
            raise ValidationError("CSV file must be UTF-8 encoded")

    reader = csv.reader(io.StringIO(content))
    try:
        raw_headers = next(reader)
    except StopIteration:
        raise ValidationError("CSV file is empty")
    except csv.Error as e:
        raise ValidationError(f"CSV parsing failed: {e}")

    headers = [h.strip().lower() for h in raw_headers]
    rows: list[dict[str, str]] = []
    line_numbers: list[int] = []
    try:
        for values in reader:
            if not any(v.strip() for v in values):
                continue
            padded = values + [""] * (len(headers) - len(values))
            rows.append(dict(zip(headers, padded)))
            line_numbers.append(reader.line_num)
    except csv.Error as e:
        raise ValidationError(f"CSV parsing failed: {e}")

    return ParsedCsv(headers=headers, rows=rows, line_numbers=line_numbers)

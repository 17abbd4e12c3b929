from __future__ import annotations

import re

from ..core.exceptions import ValidationError

_CARD_UID_RE = re.compile(r"^[0-9A-Fa-f:]+$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def require_non_empty(value: str | None, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def normalize_card_uid(value: object) -> str:
    """Validate a card UID (hex bytes separated by colons) and upper-case it."""
    if not value or not isinstance(value, str):
        raise ValidationError("Card UID is required")
    uid = value.strip()
    if not _CARD_UID_RE.match(uid):
        raise ValidationError("Invalid card UID format")
    return uid.upper()


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value))

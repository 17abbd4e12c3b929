from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Admin:
    """Domain entity: an admin console account."""

    admin_pk: int
    admin_id: str
    name: str
    password_hash: str


@dataclass(frozen=True)
class AdminSession:
    """What we store into the Flask session after login."""

    admin_id: str
    name: str

    def to_dict(self) -> dict:
        return {"adminId": self.admin_id, "name": self.name}

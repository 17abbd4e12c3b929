from __future__ import annotations

from typing import Optional, Protocol

from .model import Admin


class AdminRepository(Protocol):
    def get_by_admin_id(self, admin_id: str) -> Optional[Admin]:
        raise NotImplementedError

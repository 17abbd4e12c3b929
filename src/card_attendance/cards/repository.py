from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import PendingCard


class PendingCardRepository(Protocol):
    def upsert(self, *, uid: str, device_id: str, detected_at: datetime, expires_at: datetime) -> None:
        """Insert or refresh the single pending row for ``uid``."""

        raise NotImplementedError

    def list_unexpired(self, *, now: datetime) -> Sequence[PendingCard]:
        """Rows with ``expires_at > now``, most recent detection first."""

        raise NotImplementedError

    def delete(self, uid: str) -> bool:
        raise NotImplementedError

    def delete_expired(self, *, now: datetime) -> Sequence[str]:
        """Remove expired rows and return their UIDs."""

        raise NotImplementedError

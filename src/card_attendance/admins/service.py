from __future__ import annotations

from werkzeug.security import check_password_hash

from ..core.exceptions import AuthenticationError, ValidationError
from .model import AdminSession
from .repository import AdminRepository


class AdminAuthService:
    """Use case: authenticate an admin (login)."""

    def __init__(self, admins: AdminRepository):
        self._admins = admins

    def authenticate(self, admin_id: str, password: str) -> AdminSession:
        if not admin_id or not password:
            raise ValidationError("Admin ID and password are required")

        admin = self._admins.get_by_admin_id(admin_id.strip())
        if not admin:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(admin.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")

        return AdminSession(admin_id=admin.admin_id, name=admin.name)

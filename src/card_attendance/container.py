from __future__ import annotations

from dataclasses import dataclass

from .admins.mysql_admin_repository import MySQLAdminRepository
from .admins.repository import AdminRepository
from .admins.service import AdminAuthService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .cards.mysql_pending_card_repository import MySQLPendingCardRepository
from .cards.repository import PendingCardRepository
from .cards.service import CardRegistryService
from .core.constants import PENDING_CARD_TTL_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .devices.auth import DeviceAuthenticator
from .events.mysql_event_repository import MySQLEventRepository
from .events.repository import EventRepository
from .events.service import EventService
from .registrations.mysql_registration_repository import MySQLRegistrationRepository
from .registrations.repository import RegistrationRepository
from .registrations.service import RegistrationService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentImportService


@dataclass(frozen=True)
class Container:
    admins_repo: AdminRepository
    students_repo: StudentRepository
    pending_cards_repo: PendingCardRepository
    events_repo: EventRepository
    registrations_repo: RegistrationRepository
    attendance_repo: AttendanceRepository

    device_authenticator: DeviceAuthenticator
    admin_auth_service: AdminAuthService
    student_import_service: StudentImportService
    card_service: CardRegistryService
    event_service: EventService
    registration_service: RegistrationService
    attendance_service: AttendanceService


def assemble(
    *,
    admins_repo: AdminRepository,
    students_repo: StudentRepository,
    pending_cards_repo: PendingCardRepository,
    events_repo: EventRepository,
    registrations_repo: RegistrationRepository,
    attendance_repo: AttendanceRepository,
    device_api_key: str,
    pending_card_ttl_minutes: int = PENDING_CARD_TTL_MINUTES,
) -> Container:
    """Wire services on top of any repository implementations."""
    event_service = EventService(events_repo)

    return Container(
        admins_repo=admins_repo,
        students_repo=students_repo,
        pending_cards_repo=pending_cards_repo,
        events_repo=events_repo,
        registrations_repo=registrations_repo,
        attendance_repo=attendance_repo,
        device_authenticator=DeviceAuthenticator(device_api_key),
        admin_auth_service=AdminAuthService(admins_repo),
        student_import_service=StudentImportService(students_repo),
        card_service=CardRegistryService(students_repo, pending_cards_repo, ttl_minutes=pending_card_ttl_minutes),
        event_service=event_service,
        registration_service=RegistrationService(registrations_repo, students_repo, events_repo),
        attendance_service=AttendanceService(attendance_repo, registrations_repo, students_repo, event_service),
    )


def build_container(*, db_config: dict, device_api_key: str, pending_card_ttl_minutes: int = PENDING_CARD_TTL_MINUTES) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        admins_repo=MySQLAdminRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        pending_cards_repo=MySQLPendingCardRepository(conn),
        events_repo=MySQLEventRepository(conn),
        registrations_repo=MySQLRegistrationRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        device_api_key=device_api_key,
        pending_card_ttl_minutes=pending_card_ttl_minutes,
    )

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.authorization import CheckInAuthorizationGate, CheckInWindow
from .attendance.factory import ValidatorFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import CheckInService
from .attendance.settings import CheckInSettings
from .attendance.tokens import CheckInTokenCodec
from .audit.logger import AuditLogger
from .audit.mysql_audit_repository import MySQLAuditLogRepository
from .audit.repository import AuditLogRepository
from .database.connection import DBConfig, DatabaseConnection
from .events.mysql_event_repository import MySQLEventRepository
from .events.repository import EventRepository
from .groups.mysql_group_repository import MySQLGroupRepository
from .groups.repository import GroupMembershipService
from .users.mysql_team_role_repository import MySQLTeamRoleRepository
from .users.repository import TeamRoleService
from .users.service import CapabilityResolver


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    events_repo: EventRepository
    groups_repo: GroupMembershipService
    roles_repo: TeamRoleService
    attendance_repo: AttendanceRepository
    audit_repo: AuditLogRepository

    checkin_service: CheckInService


def wire(
    *,
    settings: CheckInSettings,
    events_repo: EventRepository,
    groups_repo: GroupMembershipService,
    roles_repo: TeamRoleService,
    attendance_repo: AttendanceRepository,
    audit_repo: AuditLogRepository,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Compose services on top of any repository implementations."""

    codec = CheckInTokenCodec(settings.qr_signing_secret)
    gate = CheckInAuthorizationGate(groups_repo, CheckInWindow(lead=settings.lead, trail=settings.trail))
    validators = ValidatorFactory(codec=codec, max_accuracy_meters=settings.max_position_accuracy_meters)

    checkin_service = CheckInService(
        attendance_repo,
        events_repo,
        gate,
        validators,
        AuditLogger(audit_repo),
        codec,
        CapabilityResolver(roles_repo),
        default_token_ttl_seconds=settings.qr_token_ttl_seconds,
    )

    return Container(
        conn=conn,
        events_repo=events_repo,
        groups_repo=groups_repo,
        roles_repo=roles_repo,
        attendance_repo=attendance_repo,
        audit_repo=audit_repo,
        checkin_service=checkin_service,
    )


def build_container(*, db_config: dict, settings: CheckInSettings) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return wire(
        settings=settings,
        events_repo=MySQLEventRepository(conn),
        groups_repo=MySQLGroupRepository(conn),
        roles_repo=MySQLTeamRoleRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        audit_repo=MySQLAuditLogRepository(conn),
        conn=conn,
    )

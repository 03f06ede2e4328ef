from __future__ import annotations

from enum import Enum


class CheckInMethod(str, Enum):
    """How a person proved (or was declared) present."""

    QR = "qr"
    LOCATION = "location"
    MANUAL = "manual"


class AttendanceStatus(str, Enum):
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"


class Visibility(str, Enum):
    """Who may self check-in to an event."""

    FULL_TEAM = "full_team"
    RESTRICTED_TO_GROUPS = "restricted_to_groups"


class Punctuality(str, Enum):
    ON_TIME = "on_time"
    LATE_10 = "late_10"
    LATE_30 = "late_30"
    VERY_LATE = "very_late"


class TeamRole(str, Enum):
    """Roles from both role sources (coarse member flag and granular role table)."""

    HEAD_COACH = "head_coach"
    ASSISTANT_COACH = "assistant_coach"
    TEAM_ADMIN = "team_admin"
    COACH = "coach"
    PLAYER = "player"


class Capability(str, Enum):
    MANUAL_OVERRIDE = "manual_override"
    ISSUE_QR_TOKEN = "issue_qr_token"
    CORRECT_RECORDS = "correct_records"
    VIEW_AUDIT = "view_audit"
    VIEW_ATTENDANCE = "view_attendance"


class AuditAction(str, Enum):
    CREATED = "created"
    CHECKED_OUT = "checked_out"
    DELETED = "deleted"

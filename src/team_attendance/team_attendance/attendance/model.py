from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..audit.model import AuditLogEntry
from ..core.enums import AttendanceStatus, CheckInMethod, Punctuality


@dataclass(frozen=True)
class CheckInEvidence:
    """What the caller brings to a check-in; which fields matter depends on the method."""

    token: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    accuracy_meters: Optional[float] = None
    device_fingerprint: Optional[str] = None
    note: Optional[str] = None

    @property
    def has_position(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True)
class NewAttendanceRecord:
    """Everything the store needs to create a record in state checked_in."""

    event_id: int
    user_id: int
    method: CheckInMethod
    device_fingerprint: Optional[str]
    checked_in_at: datetime
    actor_id: int
    punctuality: Punctuality = Punctuality.ON_TIME
    late_minutes: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    distance_meters: Optional[float] = None
    is_flagged: bool = False
    flag_reason: Optional[str] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one person's attendance at one event."""

    record_id: int
    event_id: int
    user_id: int
    method: CheckInMethod
    status: AttendanceStatus
    device_fingerprint: Optional[str]
    checked_in_at: datetime
    checked_out_at: Optional[datetime]
    actor_id: int
    punctuality: Punctuality = Punctuality.ON_TIME
    late_minutes: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    distance_meters: Optional[float] = None
    is_flagged: bool = False
    flag_reason: Optional[str] = None
    note: Optional[str] = None
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "record_id": self.record_id,
            "event_id": self.event_id,
            "user_id": self.user_id,
            "method": self.method.value,
            "status": self.status.value,
            "checked_in_at": self.checked_in_at.isoformat(),
            "checked_out_at": self.checked_out_at.isoformat() if self.checked_out_at else None,
            "actor_id": self.actor_id,
            "punctuality": self.punctuality.value,
            "late_minutes": self.late_minutes,
            "distance_meters": self.distance_meters,
            "is_flagged": self.is_flagged,
            "flag_reason": self.flag_reason,
            "note": self.note,
            "is_deleted": self.is_deleted,
            "deleted_at": self.deleted_at.isoformat() if self.deleted_at else None,
            "deleted_by": self.deleted_by,
        }


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime
    secret_version: int


@dataclass(frozen=True)
class AuditedRecord:
    """Read-model for the audit path: a record (deleted or not) plus its trail."""

    record: AttendanceRecord
    entries: Sequence[AuditLogEntry]

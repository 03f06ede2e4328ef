from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..audit.model import AuditDraft
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, NewAttendanceRecord


class AttendanceRepository(Protocol):
    """Attendance store.

    Every reader filters out soft-deleted rows except the ones whose name
    ends in `_including_deleted`, which exist for the audit path only.
    Writers append their audit entry in the same transaction.
    """

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_active(self, event_id: int, user_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_active_device_user(self, event_id: int, device_fingerprint: str) -> Optional[int]:
        raise NotImplementedError

    def list_for_event(self, event_id: int, status: Optional[AttendanceStatus] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user(
        self,
        user_id: int,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_event_including_deleted(self, event_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def insert_checkin(self, new: NewAttendanceRecord, audit: AuditDraft) -> AttendanceRecord:
        """Create a checked_in record.

        Raises StorageConflict when an active record for (event, user) or an
        active record with the same device on the event already exists.
        """

        raise NotImplementedError

    def mark_checked_out(self, record_id: int, checked_out_at: datetime, audit: AuditDraft) -> Optional[AttendanceRecord]:
        """checked_in -> checked_out; None if the record is not active and checked_in."""

        raise NotImplementedError

    def soft_delete(
        self,
        record_id: int,
        deleted_at: datetime,
        deleted_by: int,
        audit: AuditDraft,
    ) -> Optional[AttendanceRecord]:
        """Mark an active record deleted; None if it is missing or already deleted."""

        raise NotImplementedError

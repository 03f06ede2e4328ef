from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus, AuditAction


@dataclass(frozen=True)
class AuditDraft:
    """An entry waiting for the write that it describes.

    The repository fills in the record reference and the resulting status
    inside the same transaction as the transition itself.
    """

    action: AuditAction
    actor_id: int
    timestamp: datetime
    detail: Optional[str] = None


@dataclass(frozen=True)
class AuditLogEntry:
    """Immutable audit row: one per attendance transition."""

    entry_id: int
    record_id: int
    event_id: int
    user_id: int
    action: AuditAction
    actor_id: int
    timestamp: datetime
    resulting_status: AttendanceStatus
    is_deleted: bool = False
    detail: Optional[str] = None

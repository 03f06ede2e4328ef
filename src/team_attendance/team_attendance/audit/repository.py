from __future__ import annotations

from typing import Protocol, Sequence

from .model import AuditLogEntry


class AuditLogRepository(Protocol):
    """Read side of the audit log. Entries are appended by the attendance
    repository in the transaction that performs the transition."""

    def list_for_record(self, record_id: int) -> Sequence[AuditLogEntry]:
        raise NotImplementedError

    def list_for_event(self, event_id: int) -> Sequence[AuditLogEntry]:
        raise NotImplementedError

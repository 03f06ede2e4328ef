from __future__ import annotations

from typing import Any, Dict, Sequence

from ..core.enums import AttendanceStatus, AuditAction
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AuditDraft, AuditLogEntry
from .repository import AuditLogRepository


def append_entry(
    cur,
    draft: AuditDraft,
    *,
    record_id: int,
    event_id: int,
    user_id: int,
    resulting_status: AttendanceStatus,
    is_deleted: bool = False,
) -> int:
    """Insert one audit row using the caller's cursor (and transaction)."""

    cur.execute(
        """
        INSERT INTO attendance_audit_log(
            record_id, event_id, user_id, action, actor_id,
            created_at, resulting_status, is_deleted, detail
        )
        VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
        """,
        (
            int(record_id),
            int(event_id),
            int(user_id),
            draft.action.value,
            int(draft.actor_id),
            draft.timestamp,
            resulting_status.value,
            1 if is_deleted else 0,
            draft.detail,
        ),
    )
    return int(cur.lastrowid)


def _row_to_entry(r: Dict[str, Any]) -> AuditLogEntry:
    return AuditLogEntry(
        entry_id=int(r["entry_id"]),
        record_id=int(r["record_id"]),
        event_id=int(r["event_id"]),
        user_id=int(r["user_id"]),
        action=AuditAction(r["action"]),
        actor_id=int(r["actor_id"]),
        timestamp=r["created_at"],
        resulting_status=AttendanceStatus(r["resulting_status"]),
        is_deleted=bool(r["is_deleted"]),
        detail=r.get("detail"),
    )


_SELECT = """
    SELECT entry_id, record_id, event_id, user_id, action, actor_id,
           created_at, resulting_status, is_deleted, detail
    FROM attendance_audit_log
"""


class MySQLAuditLogRepository(AuditLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_record(self, record_id: int) -> Sequence[AuditLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE record_id=%s ORDER BY entry_id ASC", (int(record_id),))
            return [_row_to_entry(r) for r in fetchall(cur)]

    def list_for_event(self, event_id: int) -> Sequence[AuditLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE event_id=%s ORDER BY entry_id ASC", (int(event_id),))
            return [_row_to_entry(r) for r in fetchall(cur)]

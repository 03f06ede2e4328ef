from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..audit.model import AuditDraft
from ..audit.mysql_audit_repository import append_entry
from ..core.enums import AttendanceStatus, CheckInMethod, Punctuality
from ..core.exceptions import StorageConflict
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, NewAttendanceRecord
from .repository import AttendanceRepository

ACTIVE_USER_KEY = "uq_attendance_active_user"
ACTIVE_DEVICE_KEY = "uq_attendance_active_device"

_COLUMNS = """
    record_id, event_id, user_id, method, status, device_fingerprint,
    checked_in_at, checked_out_at, actor_id, punctuality, late_minutes,
    latitude, longitude, distance_meters, is_flagged, flag_reason, note,
    is_deleted, deleted_at, deleted_by
"""


def _opt_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def _row_to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        event_id=int(r["event_id"]),
        user_id=int(r["user_id"]),
        method=CheckInMethod(r["method"]),
        status=AttendanceStatus(r["status"]),
        device_fingerprint=r.get("device_fingerprint"),
        checked_in_at=r["checked_in_at"],
        checked_out_at=r.get("checked_out_at"),
        actor_id=int(r["actor_id"]),
        punctuality=Punctuality(r["punctuality"]),
        late_minutes=int(r["late_minutes"]) if r.get("late_minutes") is not None else None,
        latitude=_opt_float(r.get("latitude")),
        longitude=_opt_float(r.get("longitude")),
        distance_meters=_opt_float(r.get("distance_meters")),
        is_flagged=bool(r["is_flagged"]),
        flag_reason=r.get("flag_reason"),
        note=r.get("note"),
        is_deleted=bool(r["is_deleted"]),
        deleted_at=r.get("deleted_at"),
        deleted_by=int(r["deleted_by"]) if r.get("deleted_by") is not None else None,
    )


def _conflict_from(err: mysql.connector.IntegrityError) -> Optional[StorageConflict]:
    if err.errno != errorcode.ER_DUP_ENTRY:
        return None
    message = str(err.msg or err)
    if ACTIVE_DEVICE_KEY in message:
        return StorageConflict(StorageConflict.ACTIVE_DEVICE)
    if ACTIVE_USER_KEY in message:
        return StorageConflict(StorageConflict.ACTIVE_RECORD)
    return None


def _select_by_id(cur, record_id: int) -> Optional[AttendanceRecord]:
    cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE record_id=%s", (int(record_id),))
    r = fetchone(cur)
    return _row_to_record(r) if r else None


class MySQLAttendanceRepository(AttendanceRepository):
    """MySQL store.

    Partial uniqueness is carried by two generated columns (see
    database/schema.sql): `active_marker` is NULL once a row is deleted and
    `active_device` is NULL for deleted or manual rows, so the unique keys
    only bind active rows.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE record_id=%s AND is_deleted=0",
                (int(record_id),),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_active(self, event_id: int, user_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE event_id=%s AND user_id=%s AND is_deleted=0
                """,
                (int(event_id), int(user_id)),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def find_active_device_user(self, event_id: int, device_fingerprint: str) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id
                FROM attendance_records
                WHERE event_id=%s AND active_device=%s
                """,
                (int(event_id), device_fingerprint),
            )
            r = fetchone(cur)
            return int(r["user_id"]) if r else None

    def list_for_event(self, event_id: int, status: Optional[AttendanceStatus] = None) -> Sequence[AttendanceRecord]:
        clauses = ["event_id=%s", "is_deleted=0"]
        params: list[object] = [int(event_id)]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE {where} ORDER BY checked_in_at ASC",
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_for_user(
        self,
        user_id: int,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["user_id=%s", "is_deleted=0"]
        params: list[object] = [int(user_id)]
        if since is not None:
            clauses.append("checked_in_at >= %s")
            params.append(since)
        if until is not None:
            clauses.append("checked_in_at <= %s")
            params.append(until)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE {where} ORDER BY checked_in_at DESC",
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_for_event_including_deleted(self, event_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE event_id=%s ORDER BY record_id ASC",
                (int(event_id),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def insert_checkin(self, new: NewAttendanceRecord, audit: AuditDraft) -> AttendanceRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        event_id, user_id, method, status, device_fingerprint,
                        checked_in_at, actor_id, punctuality, late_minutes,
                        latitude, longitude, distance_meters, is_flagged, flag_reason, note
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(new.event_id),
                        int(new.user_id),
                        new.method.value,
                        AttendanceStatus.CHECKED_IN.value,
                        new.device_fingerprint,
                        new.checked_in_at,
                        int(new.actor_id),
                        new.punctuality.value,
                        new.late_minutes,
                        new.latitude,
                        new.longitude,
                        new.distance_meters,
                        1 if new.is_flagged else 0,
                        new.flag_reason,
                        new.note,
                    ),
                )
                record_id = int(cur.lastrowid)
                append_entry(
                    cur,
                    audit,
                    record_id=record_id,
                    event_id=new.event_id,
                    user_id=new.user_id,
                    resulting_status=AttendanceStatus.CHECKED_IN,
                )
                return _select_by_id(cur, record_id)
        except mysql.connector.IntegrityError as e:
            conflict = _conflict_from(e)
            if conflict is None:
                raise
            raise conflict from e

    def mark_checked_out(self, record_id: int, checked_out_at: datetime, audit: AuditDraft) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, checked_out_at=%s
                WHERE record_id=%s AND is_deleted=0 AND status=%s
                """,
                (
                    AttendanceStatus.CHECKED_OUT.value,
                    checked_out_at,
                    int(record_id),
                    AttendanceStatus.CHECKED_IN.value,
                ),
            )
            if cur.rowcount == 0:
                return None

            record = _select_by_id(cur, record_id)
            append_entry(
                cur,
                audit,
                record_id=record.record_id,
                event_id=record.event_id,
                user_id=record.user_id,
                resulting_status=record.status,
            )
            return record

    def soft_delete(
        self,
        record_id: int,
        deleted_at: datetime,
        deleted_by: int,
        audit: AuditDraft,
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET is_deleted=1, deleted_at=%s, deleted_by=%s
                WHERE record_id=%s AND is_deleted=0
                """,
                (deleted_at, int(deleted_by), int(record_id)),
            )
            if cur.rowcount == 0:
                return None

            record = _select_by_id(cur, record_id)
            append_entry(
                cur,
                audit,
                record_id=record.record_id,
                event_id=record.event_id,
                user_id=record.user_id,
                resulting_status=record.status,
                is_deleted=True,
            )
            return record

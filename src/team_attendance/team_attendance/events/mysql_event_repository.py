from __future__ import annotations

from typing import Any, Dict, FrozenSet, Optional

from ..core.constants import DEFAULT_CHECKIN_RADIUS_METERS
from ..core.enums import CheckInMethod, Visibility
from ..core.exceptions import ErrorCode, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Event, EventLocation
from .repository import EventRepository


def _parse_methods(raw: Optional[str]) -> FrozenSet[CheckInMethod]:
    if not raw:
        return frozenset(CheckInMethod)
    return frozenset(CheckInMethod(part.strip()) for part in raw.split(",") if part.strip())


def _row_to_event(r: Dict[str, Any], group_ids: FrozenSet[int]) -> Event:
    location = None
    if r.get("latitude") is not None and r.get("longitude") is not None:
        location = EventLocation(
            latitude=float(r["latitude"]),
            longitude=float(r["longitude"]),
            radius_meters=float(r.get("check_in_radius") or DEFAULT_CHECKIN_RADIUS_METERS),
        )

    ttl = r.get("qr_token_ttl_seconds")
    return Event(
        event_id=int(r["event_id"]),
        team_id=int(r["team_id"]),
        title=r.get("title") or "",
        starts_at=r["starts_at"],
        ends_at=r["ends_at"],
        location=location,
        visibility=Visibility(r["visibility"]),
        assigned_group_ids=group_ids,
        qr_secret_version=int(r["qr_secret_version"]),
        qr_token_ttl_seconds=int(ttl) if ttl is not None else None,
        check_in_methods=_parse_methods(r.get("check_in_methods")),
    )


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, event_id: int) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT event_id, team_id, title, starts_at, ends_at,
                       latitude, longitude, check_in_radius, visibility,
                       qr_secret_version, qr_token_ttl_seconds, check_in_methods
                FROM events
                WHERE event_id=%s
                """,
                (int(event_id),),
            )
            r = fetchone(cur)
            if not r:
                return None

            cur.execute(
                "SELECT group_id FROM event_assigned_groups WHERE event_id=%s",
                (int(event_id),),
            )
            group_ids = frozenset(int(g["group_id"]) for g in fetchall(cur))
            return _row_to_event(r, group_ids)

    def bump_qr_secret_version(self, event_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE events SET qr_secret_version = qr_secret_version + 1 WHERE event_id=%s",
                (int(event_id),),
            )
            if cur.rowcount == 0:
                raise NotFoundError(ErrorCode.EVENT_NOT_FOUND, f"Event {event_id} not found")
            cur.execute("SELECT qr_secret_version FROM events WHERE event_id=%s", (int(event_id),))
            return int(fetchone(cur)["qr_secret_version"])

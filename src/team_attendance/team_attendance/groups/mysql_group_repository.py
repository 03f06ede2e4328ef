from __future__ import annotations

from typing import FrozenSet

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .repository import GroupMembershipService


class MySQLGroupRepository(GroupMembershipService):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def groups_of(self, user_id: int, team_id: int) -> FrozenSet[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT g.group_id
                FROM attendance_groups g
                JOIN attendance_group_members m ON m.group_id = g.group_id
                WHERE m.user_id=%s AND g.team_id=%s
                """,
                (int(user_id), int(team_id)),
            )
            return frozenset(int(r["group_id"]) for r in fetchall(cur))

from __future__ import annotations

from typing import FrozenSet

from ..core.enums import TeamRole
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .repository import TeamRoleService

STAFF_ROLES = frozenset(
    {
        TeamRole.HEAD_COACH,
        TeamRole.ASSISTANT_COACH,
        TeamRole.TEAM_ADMIN,
        TeamRole.COACH,
    }
)


class MySQLTeamRoleRepository(TeamRoleService):
    """Reads both role sources: the coarse `team_members` row and the `team_roles` table."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def roles_of(self, user_id: int, team_id: int) -> FrozenSet[TeamRole]:
        roles: set[TeamRole] = set()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT role, is_admin FROM team_members WHERE team_id=%s AND user_id=%s",
                (int(team_id), int(user_id)),
            )
            member = fetchone(cur)
            if member:
                if member.get("is_admin"):
                    roles.add(TeamRole.TEAM_ADMIN)
                if member.get("role") == TeamRole.COACH.value:
                    roles.add(TeamRole.COACH)
                else:
                    roles.add(TeamRole.PLAYER)

            cur.execute(
                "SELECT role FROM team_roles WHERE team_id=%s AND user_id=%s",
                (int(team_id), int(user_id)),
            )
            for r in fetchall(cur):
                try:
                    roles.add(TeamRole(r["role"]))
                except ValueError:
                    # Unknown granular roles grant nothing.
                    continue
        return frozenset(roles)

    def has_manual_override_capability(self, user_id: int, team_id: int) -> bool:
        return bool(self.roles_of(user_id, team_id) & STAFF_ROLES)

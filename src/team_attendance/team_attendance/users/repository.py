from __future__ import annotations

from typing import Protocol


class TeamRoleService(Protocol):
    def has_manual_override_capability(self, user_id: int, team_id: int) -> bool:
        """True if any role source makes the user a coach or admin of the team."""

        raise NotImplementedError

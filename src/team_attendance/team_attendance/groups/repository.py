from __future__ import annotations

from typing import FrozenSet, Protocol


class GroupMembershipService(Protocol):
    def groups_of(self, user_id: int, team_id: int) -> FrozenSet[int]:
        """Ids of the team's attendance groups the user belongs to."""

        raise NotImplementedError

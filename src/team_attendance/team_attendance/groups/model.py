from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet


@dataclass(frozen=True)
class AttendanceGroup:
    """A named subset of team members used to scope event visibility."""

    group_id: int
    team_id: int
    name: str
    member_ids: FrozenSet[int] = frozenset()

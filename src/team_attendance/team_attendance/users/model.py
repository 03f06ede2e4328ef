from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional

from ..core.enums import Capability


@dataclass(frozen=True)
class ActorContext:
    """Who is performing a request, resolved fresh for that request.

    Capabilities are scoped to `team_id`; an actor resolved for one team
    holds no capabilities on another.
    """

    user_id: int
    team_id: Optional[int] = None
    capabilities: FrozenSet[Capability] = frozenset()

    def can(self, capability: Capability, team_id: int) -> bool:
        return self.team_id == team_id and capability in self.capabilities

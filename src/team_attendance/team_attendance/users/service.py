from __future__ import annotations

from ..core.enums import Capability
from .model import ActorContext
from .repository import TeamRoleService

STAFF_CAPABILITIES = frozenset(
    {
        Capability.MANUAL_OVERRIDE,
        Capability.ISSUE_QR_TOKEN,
        Capability.CORRECT_RECORDS,
        Capability.VIEW_AUDIT,
        Capability.VIEW_ATTENDANCE,
    }
)


class CapabilityResolver:
    """Use case: build the ActorContext for one request.

    Nothing is cached; a role revoked between two requests is already
    gone for the second one.
    """

    def __init__(self, roles: TeamRoleService):
        self._roles = roles

    def resolve(self, user_id: int, team_id: int) -> ActorContext:
        is_staff = self._roles.has_manual_override_capability(int(user_id), int(team_id))
        return ActorContext(
            user_id=int(user_id),
            team_id=int(team_id),
            capabilities=STAFF_CAPABILITIES if is_staff else frozenset(),
        )

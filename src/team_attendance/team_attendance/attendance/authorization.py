"""Check-in authorization: time window, method, role override and group visibility."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..core.enums import Capability, CheckInMethod
from ..core.exceptions import ErrorCode
from ..events.model import Event
from ..events.visibility import is_visible
from ..groups.repository import GroupMembershipService
from ..users.model import ActorContext


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[ErrorCode] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: ErrorCode) -> "Decision":
        return cls(allowed=False, reason=reason)


@dataclass(frozen=True)
class CheckInWindow:
    lead: timedelta
    trail: timedelta

    def contains(self, event: Event, now: datetime) -> bool:
        return event.starts_at - self.lead <= now <= event.ends_at + self.trail


class CheckInAuthorizationGate:
    def __init__(self, groups: GroupMembershipService, window: CheckInWindow):
        self._groups = groups
        self._window = window

    def authorize(
        self,
        *,
        actor: ActorContext,
        target_user_id: int,
        event: Event,
        method: CheckInMethod,
        now: datetime,
    ) -> Decision:
        """Rules are evaluated in order; the first failing rule names the denial."""

        if not self._window.contains(event, now):
            return Decision.deny(ErrorCode.OUTSIDE_TIME_WINDOW)

        if not event.accepts(method):
            return Decision.deny(ErrorCode.METHOD_NOT_ENABLED)

        # Visibility only gates self-service; the override applies to anyone on the team.
        if method == CheckInMethod.MANUAL:
            if actor.can(Capability.MANUAL_OVERRIDE, event.team_id):
                return Decision.allow()
            return Decision.deny(ErrorCode.NOT_AUTHORIZED)

        if actor.user_id == int(target_user_id):
            group_ids = self._groups.groups_of(int(target_user_id), event.team_id)
            if is_visible(event, int(target_user_id), group_ids):
                return Decision.allow()
            return Decision.deny(ErrorCode.NOT_IN_ASSIGNED_GROUP)

        return Decision.deny(ErrorCode.NOT_AUTHORIZED)

    def authorize_check_out(self, *, actor: ActorContext, target_user_id: int, event: Event) -> Decision:
        if actor.user_id == int(target_user_id) or actor.can(Capability.MANUAL_OVERRIDE, event.team_id):
            return Decision.allow()
        return Decision.deny(ErrorCode.NOT_AUTHORIZED)

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional

from ..core.enums import CheckInMethod, Visibility


@dataclass(frozen=True)
class EventLocation:
    latitude: float
    longitude: float
    radius_meters: float


@dataclass(frozen=True)
class Event:
    """Domain entity: the slice of an event the check-in engine needs.

    `assigned_group_ids` is only meaningful when visibility is
    RESTRICTED_TO_GROUPS. `qr_token_ttl_seconds` is the expiry policy for
    issued check-in tokens; None means the configured default applies.
    """

    event_id: int
    team_id: int
    starts_at: datetime
    ends_at: datetime
    location: Optional[EventLocation] = None
    visibility: Visibility = Visibility.FULL_TEAM
    assigned_group_ids: FrozenSet[int] = frozenset()
    qr_secret_version: int = 1
    qr_token_ttl_seconds: Optional[int] = None
    check_in_methods: FrozenSet[CheckInMethod] = field(default_factory=lambda: frozenset(CheckInMethod))
    title: str = ""

    def accepts(self, method: CheckInMethod) -> bool:
        return method in self.check_in_methods

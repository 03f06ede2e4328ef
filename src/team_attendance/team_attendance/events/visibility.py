"""Event visibility: who may see and self check-in to an event."""

from __future__ import annotations

from typing import AbstractSet, Iterable, List

from ..core.enums import Visibility
from .model import Event


def is_visible(event: Event, user_id: int, user_group_ids: AbstractSet[int]) -> bool:
    """True for full-team events, otherwise iff the user is in an assigned group."""

    if event.visibility == Visibility.FULL_TEAM:
        return True
    return not event.assigned_group_ids.isdisjoint(user_group_ids)


def filter_visible(events: Iterable[Event], user_id: int, user_group_ids: AbstractSet[int]) -> List[Event]:
    group_ids = frozenset(user_group_ids)
    return [e for e in events if is_visible(e, user_id, group_ids)]

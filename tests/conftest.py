from __future__ import annotations

from datetime import datetime

import pytest

from fakes import (
    COACH_ID,
    G1,
    RESTRICTED_EVENT_ID,
    TEAM_ID,
    InMemoryAttendance,
    InMemoryAudit,
    InMemoryEvents,
    InMemoryGroups,
    InMemoryRoles,
    default_groups,
    make_event,
)
from team_attendance.attendance.settings import CheckInSettings
from team_attendance.container import wire
from team_attendance.core.enums import Visibility


@pytest.fixture
def fixed_now() -> datetime:
    # five minutes after the default event starts
    return datetime(2026, 3, 1, 18, 5, 0)


@pytest.fixture
def events() -> InMemoryEvents:
    return InMemoryEvents(
        [
            make_event(),
            make_event(
                event_id=RESTRICTED_EVENT_ID,
                title="Goalkeepers",
                visibility=Visibility.RESTRICTED_TO_GROUPS,
                assigned_group_ids=frozenset({G1}),
            ),
        ]
    )


@pytest.fixture
def groups() -> InMemoryGroups:
    return InMemoryGroups(default_groups())


@pytest.fixture
def roles() -> InMemoryRoles:
    return InMemoryRoles({(COACH_ID, TEAM_ID)})


@pytest.fixture
def attendance() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def settings() -> CheckInSettings:
    return CheckInSettings(qr_signing_secret="test-secret", qr_token_ttl_seconds=300)


@pytest.fixture
def container(settings, events, groups, roles, attendance):
    return wire(
        settings=settings,
        events_repo=events,
        groups_repo=groups,
        roles_repo=roles,
        attendance_repo=attendance,
        audit_repo=InMemoryAudit(attendance),
    )


@pytest.fixture
def service(container):
    return container.checkin_service


@pytest.fixture
def resolve(service):
    """Actor for a user on the default event's team."""

    def _resolve(user_id: int, event_id: int = 1):
        return service.actor_for(user_id, event_id)

    return _resolve

from datetime import datetime, timedelta

import pytest

from fakes import (
    COACH_ID,
    G1,
    OTHER_PLAYER,
    PLAYER_IN_G1,
    PLAYER_OUTSIDE_G1,
    TEAM_ID,
    InMemoryGroups,
    default_groups,
    make_event,
)
from team_attendance.attendance.authorization import CheckInAuthorizationGate, CheckInWindow
from team_attendance.core.enums import CheckInMethod, Visibility
from team_attendance.core.exceptions import ErrorCode
from team_attendance.users.model import ActorContext
from team_attendance.users.service import STAFF_CAPABILITIES

RESTRICTED = make_event(event_id=2, visibility=Visibility.RESTRICTED_TO_GROUPS, assigned_group_ids=frozenset({G1}))
COACH = ActorContext(user_id=COACH_ID, team_id=TEAM_ID, capabilities=STAFF_CAPABILITIES)


def player(user_id):
    return ActorContext(user_id=user_id, team_id=TEAM_ID)


@pytest.fixture
def gate():
    return CheckInAuthorizationGate(
        InMemoryGroups(default_groups()),
        CheckInWindow(lead=timedelta(minutes=30), trail=timedelta(minutes=15)),
    )


def test_self_check_in_to_full_team_event(gate, fixed_now):
    decision = gate.authorize(
        actor=player(OTHER_PLAYER), target_user_id=OTHER_PLAYER, event=make_event(), method=CheckInMethod.QR, now=fixed_now
    )
    assert decision.allowed


def test_restricted_event_requires_assigned_group(gate, fixed_now):
    allowed = gate.authorize(
        actor=player(PLAYER_IN_G1), target_user_id=PLAYER_IN_G1, event=RESTRICTED, method=CheckInMethod.QR, now=fixed_now
    )
    denied = gate.authorize(
        actor=player(PLAYER_OUTSIDE_G1),
        target_user_id=PLAYER_OUTSIDE_G1,
        event=RESTRICTED,
        method=CheckInMethod.QR,
        now=fixed_now,
    )

    assert allowed.allowed
    assert denied.reason == ErrorCode.NOT_IN_ASSIGNED_GROUP


def test_manual_override_bypasses_visibility(gate, fixed_now):
    decision = gate.authorize(
        actor=COACH, target_user_id=PLAYER_OUTSIDE_G1, event=RESTRICTED, method=CheckInMethod.MANUAL, now=fixed_now
    )
    assert decision.allowed


def test_manual_without_capability_is_refused_even_for_self(gate, fixed_now):
    decision = gate.authorize(
        actor=player(PLAYER_IN_G1), target_user_id=PLAYER_IN_G1, event=make_event(), method=CheckInMethod.MANUAL, now=fixed_now
    )
    assert decision.reason == ErrorCode.NOT_AUTHORIZED


def test_capability_on_another_team_does_not_count(gate, fixed_now):
    foreign_coach = ActorContext(user_id=COACH_ID, team_id=TEAM_ID + 1, capabilities=STAFF_CAPABILITIES)
    decision = gate.authorize(
        actor=foreign_coach, target_user_id=OTHER_PLAYER, event=make_event(), method=CheckInMethod.MANUAL, now=fixed_now
    )
    assert decision.reason == ErrorCode.NOT_AUTHORIZED


def test_checking_in_someone_else_needs_manual_method(gate, fixed_now):
    decision = gate.authorize(
        actor=COACH, target_user_id=OTHER_PLAYER, event=make_event(), method=CheckInMethod.LOCATION, now=fixed_now
    )
    assert decision.reason == ErrorCode.NOT_AUTHORIZED


@pytest.mark.parametrize(
    "now, allowed",
    [
        (datetime(2026, 3, 1, 17, 29, 59), False),
        (datetime(2026, 3, 1, 17, 30, 0), True),
        (datetime(2026, 3, 1, 20, 15, 0), True),
        (datetime(2026, 3, 1, 20, 15, 1), False),
    ],
)
def test_time_window_edges(gate, now, allowed):
    decision = gate.authorize(
        actor=player(OTHER_PLAYER), target_user_id=OTHER_PLAYER, event=make_event(), method=CheckInMethod.QR, now=now
    )
    assert decision.allowed is allowed
    if not allowed:
        assert decision.reason == ErrorCode.OUTSIDE_TIME_WINDOW


def test_time_window_applies_to_manual_override(gate):
    decision = gate.authorize(
        actor=COACH,
        target_user_id=OTHER_PLAYER,
        event=make_event(),
        method=CheckInMethod.MANUAL,
        now=datetime(2026, 3, 2, 9, 0),
    )
    assert decision.reason == ErrorCode.OUTSIDE_TIME_WINDOW


def test_method_must_be_enabled_for_event(gate, fixed_now):
    event = make_event(check_in_methods=frozenset({CheckInMethod.QR, CheckInMethod.MANUAL}))
    decision = gate.authorize(
        actor=player(OTHER_PLAYER), target_user_id=OTHER_PLAYER, event=event, method=CheckInMethod.LOCATION, now=fixed_now
    )
    assert decision.reason == ErrorCode.METHOD_NOT_ENABLED


def test_window_is_checked_before_visibility(gate):
    decision = gate.authorize(
        actor=player(PLAYER_OUTSIDE_G1),
        target_user_id=PLAYER_OUTSIDE_G1,
        event=RESTRICTED,
        method=CheckInMethod.QR,
        now=datetime(2026, 3, 2, 9, 0),
    )
    assert decision.reason == ErrorCode.OUTSIDE_TIME_WINDOW


def test_check_out_self_or_override(gate):
    event = make_event()
    assert gate.authorize_check_out(actor=player(OTHER_PLAYER), target_user_id=OTHER_PLAYER, event=event).allowed
    assert gate.authorize_check_out(actor=COACH, target_user_id=OTHER_PLAYER, event=event).allowed
    assert (
        gate.authorize_check_out(actor=player(PLAYER_IN_G1), target_user_id=OTHER_PLAYER, event=event).reason
        == ErrorCode.NOT_AUTHORIZED
    )

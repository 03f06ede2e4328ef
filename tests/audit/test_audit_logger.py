import logging
from datetime import timedelta

import pytest

from fakes import COACH_ID, FULL_TEAM_EVENT_ID, OTHER_PLAYER, at_field
from team_attendance.core.enums import AttendanceStatus, AuditAction, CheckInMethod
from team_attendance.core.exceptions import EvidenceError, StateError


def test_one_entry_per_transition(service, resolve, container, fixed_now):
    actor = resolve(OTHER_PLAYER)
    record = service.check_in(actor, FULL_TEAM_EVENT_ID, OTHER_PLAYER, CheckInMethod.LOCATION, at_field(), now=fixed_now)
    service.check_out(actor, FULL_TEAM_EVENT_ID, OTHER_PLAYER, now=fixed_now + timedelta(hours=1))
    service.delete_record(resolve(COACH_ID), FULL_TEAM_EVENT_ID, record.record_id, now=fixed_now + timedelta(hours=2))

    entries = container.audit_repo.list_for_record(record.record_id)

    assert [e.action for e in entries] == [AuditAction.CREATED, AuditAction.CHECKED_OUT, AuditAction.DELETED]
    assert [e.actor_id for e in entries] == [OTHER_PLAYER, OTHER_PLAYER, COACH_ID]
    assert [e.resulting_status for e in entries] == [
        AttendanceStatus.CHECKED_IN,
        AttendanceStatus.CHECKED_OUT,
        AttendanceStatus.CHECKED_OUT,
    ]
    assert [e.is_deleted for e in entries] == [False, False, True]
    assert [e.timestamp for e in entries] == [
        fixed_now,
        fixed_now + timedelta(hours=1),
        fixed_now + timedelta(hours=2),
    ]


def test_failed_transitions_write_nothing(service, resolve, container, fixed_now):
    actor = resolve(OTHER_PLAYER)
    service.check_in(actor, FULL_TEAM_EVENT_ID, OTHER_PLAYER, CheckInMethod.LOCATION, at_field(), now=fixed_now)
    service.check_out(actor, FULL_TEAM_EVENT_ID, OTHER_PLAYER, now=fixed_now)

    with pytest.raises(StateError):
        service.check_out(actor, FULL_TEAM_EVENT_ID, OTHER_PLAYER, now=fixed_now)

    assert len(container.audit_repo.list_for_event(FULL_TEAM_EVENT_ID)) == 2


def test_committed_transitions_are_logged(service, resolve, fixed_now, caplog):
    caplog.set_level(logging.INFO, logger="team_attendance")

    service.check_in(
        resolve(OTHER_PLAYER), FULL_TEAM_EVENT_ID, OTHER_PLAYER, CheckInMethod.LOCATION, at_field(), now=fixed_now
    )

    assert any("attendance created" in r.getMessage() for r in caplog.records)


def test_denials_are_logged_with_their_code(service, resolve, fixed_now, caplog):
    caplog.set_level(logging.INFO, logger="team_attendance")

    with pytest.raises(EvidenceError):
        service.check_in(
            resolve(OTHER_PLAYER),
            FULL_TEAM_EVENT_ID,
            OTHER_PLAYER,
            CheckInMethod.LOCATION,
            at_field(latitude=0.0, longitude=0.0),
            now=fixed_now,
        )

    assert any("code=OUTSIDE_RADIUS" in r.getMessage() for r in caplog.records)

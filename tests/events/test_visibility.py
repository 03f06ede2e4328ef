from fakes import G1, make_event
from team_attendance.core.enums import Visibility
from team_attendance.events.visibility import filter_visible, is_visible

RESTRICTED = make_event(event_id=2, visibility=Visibility.RESTRICTED_TO_GROUPS, assigned_group_ids=frozenset({G1, 101}))


def test_full_team_event_is_visible_to_everyone():
    assert is_visible(make_event(), user_id=7, user_group_ids=frozenset())


def test_restricted_event_visible_iff_user_shares_an_assigned_group():
    assert is_visible(RESTRICTED, 7, frozenset({101}))
    assert is_visible(RESTRICTED, 7, {G1, 555})
    assert not is_visible(RESTRICTED, 7, frozenset({555}))
    assert not is_visible(RESTRICTED, 7, frozenset())


def test_restricted_event_without_groups_is_visible_to_nobody():
    event = make_event(visibility=Visibility.RESTRICTED_TO_GROUPS)
    assert not is_visible(event, 7, frozenset({G1}))


def test_filter_visible_keeps_order():
    open_event = make_event(event_id=1)
    later = make_event(event_id=3)
    assert filter_visible([open_event, RESTRICTED, later], 7, [555]) == [open_event, later]
    assert filter_visible([open_event, RESTRICTED, later], 7, [G1]) == [open_event, RESTRICTED, later]

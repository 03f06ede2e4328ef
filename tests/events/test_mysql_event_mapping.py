from datetime import datetime
from decimal import Decimal

from team_attendance.core.enums import CheckInMethod, Visibility
from team_attendance.events.mysql_event_repository import _parse_methods, _row_to_event


def _row(**overrides):
    row = {
        "event_id": 5,
        "team_id": 10,
        "title": "Match",
        "starts_at": datetime(2026, 3, 1, 18, 0),
        "ends_at": datetime(2026, 3, 1, 20, 0),
        "latitude": Decimal("52.5200000"),
        "longitude": Decimal("13.4050000"),
        "check_in_radius": 150,
        "visibility": "restricted_to_groups",
        "qr_secret_version": 4,
        "qr_token_ttl_seconds": None,
        "check_in_methods": "qr,manual",
    }
    row.update(overrides)
    return row


def test_row_to_event():
    event = _row_to_event(_row(), frozenset({100}))

    assert event.visibility == Visibility.RESTRICTED_TO_GROUPS
    assert event.assigned_group_ids == frozenset({100})
    assert event.location.latitude == 52.52
    assert event.location.radius_meters == 150
    assert event.check_in_methods == frozenset({CheckInMethod.QR, CheckInMethod.MANUAL})
    assert event.qr_token_ttl_seconds is None


def test_missing_coordinates_mean_no_location():
    assert _row_to_event(_row(latitude=None), frozenset()).location is None


def test_empty_method_list_enables_everything():
    assert _parse_methods(None) == frozenset(CheckInMethod)
    assert _parse_methods(" qr , location ") == frozenset({CheckInMethod.QR, CheckInMethod.LOCATION})

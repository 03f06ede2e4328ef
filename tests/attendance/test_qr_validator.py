from datetime import timedelta

import pytest
from itsdangerous import URLSafeSerializer

from fakes import make_event
from team_attendance.attendance.model import CheckInEvidence
from team_attendance.attendance.tokens import CheckInTokenCodec, InvalidToken
from team_attendance.attendance.validators.qr_validator import QrValidator
from team_attendance.core.constants import QR_TOKEN_SALT
from team_attendance.core.exceptions import ErrorCode
from team_attendance.events.model import EventLocation

TTL = timedelta(minutes=5)


@pytest.fixture
def codec():
    return CheckInTokenCodec("qr-secret")


@pytest.fixture
def validator(codec):
    return QrValidator(codec)


@pytest.fixture
def event():
    return make_event(qr_secret_version=3)


def _token(codec, issued_at, *, event_id=1, version=3):
    return codec.mint(event_id=event_id, secret_version=version, expires_at=issued_at + TTL)


def test_token_round_trip(codec, fixed_now):
    claims = codec.decode(_token(codec, fixed_now))
    assert (claims.event_id, claims.secret_version, claims.expires_at) == (1, 3, fixed_now + TTL)


def test_valid_just_before_expiry(validator, codec, event, fixed_now):
    token = _token(codec, fixed_now)
    assert validator.verify(token, event, fixed_now + timedelta(minutes=4, seconds=59)) is None


def test_expired_just_after_expiry(validator, codec, event, fixed_now):
    token = _token(codec, fixed_now)
    assert validator.verify(token, event, fixed_now + timedelta(minutes=5, seconds=1)) == ErrorCode.QR_EXPIRED


def test_expiry_instant_itself_is_expired(validator, codec, event, fixed_now):
    assert validator.verify(_token(codec, fixed_now), event, fixed_now + TTL) == ErrorCode.QR_EXPIRED


def test_token_for_another_event(validator, codec, event, fixed_now):
    assert validator.verify(_token(codec, fixed_now, event_id=99), event, fixed_now) == ErrorCode.QR_EVENT_MISMATCH


def test_token_from_a_previous_issue_is_stale(validator, codec, event, fixed_now):
    assert validator.verify(_token(codec, fixed_now, version=2), event, fixed_now) == ErrorCode.QR_STALE_VERSION


def test_tampered_or_foreign_tokens_fail_signature(validator, codec, event, fixed_now):
    _, signature = _token(codec, fixed_now).rsplit(".", 1)
    other_payload, _ = _token(codec, fixed_now, version=4).rsplit(".", 1)
    spliced = f"{other_payload}.{signature}"
    forged = CheckInTokenCodec("someone-else").mint(event_id=1, secret_version=3, expires_at=fixed_now + TTL)

    assert validator.verify(spliced, event, fixed_now) == ErrorCode.QR_INVALID_SIGNATURE
    assert validator.verify(forged, event, fixed_now) == ErrorCode.QR_INVALID_SIGNATURE
    assert validator.verify("not-a-token", event, fixed_now) == ErrorCode.QR_INVALID_SIGNATURE
    assert validator.verify(None, event, fixed_now) == ErrorCode.QR_INVALID_SIGNATURE


def test_decode_rejects_signed_payload_with_wrong_shape():
    # Correct signature, but not a token payload.
    token = URLSafeSerializer("qr-secret", salt=QR_TOKEN_SALT).dumps({"hello": "world"})
    with pytest.raises(InvalidToken):
        CheckInTokenCodec("qr-secret").decode(token)


def test_validate_requires_device_fingerprint(validator, codec, event, fixed_now):
    verdict = validator.validate(event=event, evidence=CheckInEvidence(token=_token(codec, fixed_now)), now=fixed_now)
    assert verdict.reason == ErrorCode.MISSING_DEVICE_FINGERPRINT


def test_far_away_position_flags_but_does_not_deny(validator, codec, fixed_now):
    event = make_event(qr_secret_version=3, location=EventLocation(latitude=0.0, longitude=0.0, radius_meters=50))
    evidence = CheckInEvidence(token=_token(codec, fixed_now), latitude=0.0, longitude=0.001, device_fingerprint="p")

    verdict = validator.validate(event=event, evidence=evidence, now=fixed_now)

    assert verdict.allowed
    assert verdict.flag_reason.startswith("GPS mismatch with QR")
    assert verdict.distance_meters == pytest.approx(111.19, abs=0.01)


def test_nearby_position_is_not_flagged(validator, codec, fixed_now):
    event = make_event(qr_secret_version=3, location=EventLocation(latitude=0.0, longitude=0.0, radius_meters=100))
    evidence = CheckInEvidence(token=_token(codec, fixed_now), latitude=0.0, longitude=0.001, device_fingerprint="p")

    verdict = validator.validate(event=event, evidence=evidence, now=fixed_now)

    assert verdict.allowed
    assert verdict.flag_reason is None


@pytest.mark.parametrize(
    "position",
    [
        dict(latitude=float("nan"), longitude=0.001),
        dict(latitude=91.0, longitude=0.001),
        dict(latitude=0.0, longitude=float("inf")),
    ],
)
def test_garbled_position_is_dropped_not_stored(validator, codec, fixed_now, position):
    event = make_event(qr_secret_version=3, location=EventLocation(latitude=0.0, longitude=0.0, radius_meters=50))
    evidence = CheckInEvidence(token=_token(codec, fixed_now), device_fingerprint="p", **position)

    verdict = validator.validate(event=event, evidence=evidence, now=fixed_now)

    assert verdict.allowed
    assert (verdict.latitude, verdict.longitude, verdict.distance_meters) == (None, None, None)
    assert verdict.flag_reason is None

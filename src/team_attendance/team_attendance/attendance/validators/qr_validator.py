from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.constants import QR_POSITION_FLAG_BUFFER
from ...core.exceptions import ErrorCode
from ...events.model import Event
from ..geo import haversine_meters
from ..model import CheckInEvidence
from ..tokens import CheckInTokenCodec, InvalidToken
from .base import CheckInValidator, Verdict, clean_fingerprint, usable_position


class QrValidator(CheckInValidator):
    """Scanned-code check-in: the token must be genuine, current and for this event."""

    def __init__(self, codec: CheckInTokenCodec, *, flag_buffer: float = QR_POSITION_FLAG_BUFFER):
        self._codec = codec
        self._flag_buffer = float(flag_buffer)

    def verify(self, token: Optional[str], event: Event, now: datetime) -> Optional[ErrorCode]:
        if not token:
            return ErrorCode.QR_INVALID_SIGNATURE
        try:
            claims = self._codec.decode(token)
        except InvalidToken:
            return ErrorCode.QR_INVALID_SIGNATURE

        if not now < claims.expires_at:
            return ErrorCode.QR_EXPIRED
        if claims.event_id != event.event_id:
            return ErrorCode.QR_EVENT_MISMATCH
        if claims.secret_version != event.qr_secret_version:
            return ErrorCode.QR_STALE_VERSION
        return None

    def validate(self, *, event: Event, evidence: CheckInEvidence, now: datetime) -> Verdict:
        failure = self.verify(evidence.token, event, now)
        if failure:
            return Verdict.deny(failure)

        fingerprint = clean_fingerprint(evidence)
        if not fingerprint:
            return Verdict.deny(ErrorCode.MISSING_DEVICE_FINGERPRINT)

        if not usable_position(evidence):
            # A garbled reading is treated as no reading at all.
            return Verdict(allowed=True, device_fingerprint=fingerprint)

        distance = None
        flag_reason = None
        if event.location:
            distance = haversine_meters(
                evidence.latitude, evidence.longitude, event.location.latitude, event.location.longitude
            )
            # Position is optional for QR; a far-away reading flags but does not deny.
            if distance > event.location.radius_meters * self._flag_buffer:
                flag_reason = (
                    f"GPS mismatch with QR ({round(distance)}m from event, "
                    f"radius: {round(event.location.radius_meters)}m)"
                )

        return Verdict(
            allowed=True,
            device_fingerprint=fingerprint,
            latitude=evidence.latitude,
            longitude=evidence.longitude,
            distance_meters=distance,
            flag_reason=flag_reason,
        )

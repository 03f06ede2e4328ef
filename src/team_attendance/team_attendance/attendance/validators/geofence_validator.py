from __future__ import annotations

from datetime import datetime

from ...core.exceptions import ErrorCode
from ...events.model import Event
from ..geo import haversine_meters
from ..model import CheckInEvidence
from .base import CheckInValidator, Verdict, clean_fingerprint, usable_accuracy, usable_position


class GeofenceValidator(CheckInValidator):
    """Location check-in: the reported position must fall inside the event's circle."""

    def __init__(self, *, max_accuracy_meters: float):
        self._max_accuracy = float(max_accuracy_meters)

    def validate(self, *, event: Event, evidence: CheckInEvidence, now: datetime) -> Verdict:
        if event.location is None:
            return Verdict.deny(ErrorCode.LOCATION_NOT_CONFIGURED)

        if not usable_position(evidence):
            return Verdict.deny(ErrorCode.NO_POSITION_SIGNAL)
        if not usable_accuracy(evidence.accuracy_meters, self._max_accuracy):
            return Verdict.deny(ErrorCode.NO_POSITION_SIGNAL)

        distance = haversine_meters(
            evidence.latitude, evidence.longitude, event.location.latitude, event.location.longitude
        )
        if distance > event.location.radius_meters:
            return Verdict.deny(ErrorCode.OUTSIDE_RADIUS)

        fingerprint = clean_fingerprint(evidence)
        if not fingerprint:
            return Verdict.deny(ErrorCode.MISSING_DEVICE_FINGERPRINT)

        return Verdict(
            allowed=True,
            device_fingerprint=fingerprint,
            latitude=evidence.latitude,
            longitude=evidence.longitude,
            distance_meters=distance,
        )

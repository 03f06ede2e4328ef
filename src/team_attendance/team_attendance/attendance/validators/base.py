from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.exceptions import ErrorCode
from ...events.model import Event
from ..model import CheckInEvidence


@dataclass(frozen=True)
class Verdict:
    """Outcome of checking one method's evidence.

    On success it also carries what the record should store: the device
    fingerprint (None for manual), the reported position and any flag.
    """

    allowed: bool
    reason: Optional[ErrorCode] = None
    device_fingerprint: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    distance_meters: Optional[float] = None
    flag_reason: Optional[str] = None

    @classmethod
    def deny(cls, reason: ErrorCode) -> "Verdict":
        return cls(allowed=False, reason=reason)


class CheckInValidator(ABC):
    """Strategy Pattern: one evidence check per check-in method."""

    @abstractmethod
    def validate(self, *, event: Event, evidence: CheckInEvidence, now: datetime) -> Verdict:
        raise NotImplementedError


def clean_fingerprint(evidence: CheckInEvidence) -> Optional[str]:
    fingerprint = (evidence.device_fingerprint or "").strip()
    return fingerprint or None


def usable_position(evidence: CheckInEvidence) -> bool:
    if not evidence.has_position:
        return False
    lat, lon = evidence.latitude, evidence.longitude
    return math.isfinite(lat) and math.isfinite(lon) and -90 <= lat <= 90 and -180 <= lon <= 180


def usable_accuracy(accuracy_meters: Optional[float], limit: float) -> bool:
    if accuracy_meters is None:
        return True
    return math.isfinite(accuracy_meters) and 0 <= accuracy_meters <= limit

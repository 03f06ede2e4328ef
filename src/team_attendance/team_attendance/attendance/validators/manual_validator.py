from __future__ import annotations

from datetime import datetime

from ...events.model import Event
from ..model import CheckInEvidence
from .base import CheckInValidator, Verdict


class ManualValidator(CheckInValidator):
    """Coach/admin override: no evidence needed, and no device or position is ever stored."""

    def validate(self, *, event: Event, evidence: CheckInEvidence, now: datetime) -> Verdict:
        return Verdict(allowed=True, device_fingerprint=None)

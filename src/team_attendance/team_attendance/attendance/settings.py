from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from types import ModuleType

from ..core.constants import (
    DEFAULT_CHECKIN_LEAD_MINUTES,
    DEFAULT_CHECKIN_TRAIL_MINUTES,
    DEFAULT_MAX_POSITION_ACCURACY_METERS,
    DEFAULT_QR_TOKEN_TTL_SECONDS,
)


@dataclass(frozen=True)
class CheckInSettings:
    qr_signing_secret: str
    qr_token_ttl_seconds: int = DEFAULT_QR_TOKEN_TTL_SECONDS
    lead_minutes: int = DEFAULT_CHECKIN_LEAD_MINUTES
    trail_minutes: int = DEFAULT_CHECKIN_TRAIL_MINUTES
    max_position_accuracy_meters: float = DEFAULT_MAX_POSITION_ACCURACY_METERS

    @property
    def lead(self) -> timedelta:
        return timedelta(minutes=self.lead_minutes)

    @property
    def trail(self) -> timedelta:
        return timedelta(minutes=self.trail_minutes)

    @classmethod
    def from_module(cls, settings: ModuleType) -> "CheckInSettings":
        return cls(
            qr_signing_secret=str(getattr(settings, "QR_SIGNING_SECRET")),
            qr_token_ttl_seconds=int(getattr(settings, "QR_TOKEN_TTL_SECONDS", DEFAULT_QR_TOKEN_TTL_SECONDS)),
            lead_minutes=int(getattr(settings, "CHECKIN_LEAD_MINUTES", DEFAULT_CHECKIN_LEAD_MINUTES)),
            trail_minutes=int(getattr(settings, "CHECKIN_TRAIL_MINUTES", DEFAULT_CHECKIN_TRAIL_MINUTES)),
            max_position_accuracy_meters=float(
                getattr(settings, "MAX_POSITION_ACCURACY_METERS", DEFAULT_MAX_POSITION_ACCURACY_METERS)
            ),
        )

from __future__ import annotations

from datetime import datetime
from typing import Optional, Tuple

from ..core.constants import LATE_10_THRESHOLD_MINUTES, LATE_30_THRESHOLD_MINUTES
from ..core.enums import Punctuality


def classify(starts_at: datetime, checked_in_at: datetime) -> Tuple[Punctuality, Optional[int]]:
    """Punctuality bucket and whole minutes late (None when not late)."""

    late_minutes = int((checked_in_at - starts_at).total_seconds() // 60)
    if late_minutes <= 0:
        return Punctuality.ON_TIME, None
    if late_minutes <= LATE_10_THRESHOLD_MINUTES:
        return Punctuality.LATE_10, late_minutes
    if late_minutes <= LATE_30_THRESHOLD_MINUTES:
        return Punctuality.LATE_30, late_minutes
    return Punctuality.VERY_LATE, late_minutes

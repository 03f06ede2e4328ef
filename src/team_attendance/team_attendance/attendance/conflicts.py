from __future__ import annotations

from typing import Optional

from ..core.enums import CheckInMethod
from ..core.exceptions import ErrorCode
from .authorization import Decision
from .repository import AttendanceRepository


class DeviceConflictDetector:
    """One physical device may back at most one identity per event.

    This is the early, friendly check. The store's unique key on
    (event, active device) is what holds under concurrent requests.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def check(
        self,
        *,
        event_id: int,
        user_id: int,
        method: CheckInMethod,
        device_fingerprint: Optional[str],
    ) -> Decision:
        if method == CheckInMethod.MANUAL or not device_fingerprint:
            return Decision.allow()

        owner = self._attendance.find_active_device_user(int(event_id), device_fingerprint)
        if owner is not None and owner != int(user_id):
            return Decision.deny(ErrorCode.DEVICE_ALREADY_USED)
        return Decision.allow()

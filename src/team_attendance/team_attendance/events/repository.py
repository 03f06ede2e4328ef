from __future__ import annotations

from typing import Optional, Protocol

from .model import Event


class EventRepository(Protocol):
    def get(self, event_id: int) -> Optional[Event]:
        raise NotImplementedError

    def bump_qr_secret_version(self, event_id: int) -> int:
        """Increment and return the event's QR secret version.

        Every previously issued token for the event becomes stale.
        """

        raise NotImplementedError

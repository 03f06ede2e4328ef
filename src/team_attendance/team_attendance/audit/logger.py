from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AuditAction
from .model import AuditDraft, AuditLogEntry
from .repository import AuditLogRepository

logger = logging.getLogger(__name__)


class AuditLogger:
    """Builds audit entries for transitions and reads the trail back.

    Entries are never edited or removed; the trail is the only path back to
    soft-deleted history.
    """

    def __init__(self, entries: AuditLogRepository):
        self._entries = entries

    def draft(self, action: AuditAction, *, actor_id: int, at: datetime, detail: Optional[str] = None) -> AuditDraft:
        return AuditDraft(action=action, actor_id=int(actor_id), timestamp=at, detail=detail)

    def committed(self, draft: AuditDraft, *, record_id: int, event_id: int, user_id: int, status: str) -> None:
        logger.info(
            "attendance %s: record=%s event=%s user=%s actor=%s status=%s",
            draft.action.value,
            record_id,
            event_id,
            user_id,
            draft.actor_id,
            status,
        )

    def trail_for_event(self, event_id: int) -> Sequence[AuditLogEntry]:
        return self._entries.list_for_event(int(event_id))

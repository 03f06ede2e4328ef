from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

from ..audit.logger import AuditLogger
from ..common.datetime_utils import day_bounds, now_local
from ..core.enums import AttendanceStatus, AuditAction, Capability, CheckInMethod
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    ErrorCode,
    EvidenceError,
    NotFoundError,
    StateError,
    StorageConflict,
)
from ..events.model import Event
from ..events.repository import EventRepository
from ..users.model import ActorContext
from ..users.service import CapabilityResolver
from .authorization import CheckInAuthorizationGate
from .conflicts import DeviceConflictDetector
from .factory import ValidatorFactory
from .model import AttendanceRecord, AuditedRecord, CheckInEvidence, IssuedToken, NewAttendanceRecord
from .punctuality import classify
from .repository import AttendanceRepository
from .tokens import CheckInTokenCodec

logger = logging.getLogger(__name__)


class CheckInService:
    """Use cases: check in, check out, issue QR tokens, correct and read attendance.

    Each call either commits one transition (record write plus its audit
    entry) or raises a DomainError carrying a stable ErrorCode.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        events: EventRepository,
        gate: CheckInAuthorizationGate,
        validators: ValidatorFactory,
        audit: AuditLogger,
        codec: CheckInTokenCodec,
        actors: CapabilityResolver,
        *,
        default_token_ttl_seconds: int,
    ):
        self._attendance = attendance
        self._events = events
        self._gate = gate
        self._validators = validators
        self._audit = audit
        self._codec = codec
        self._actors = actors
        self._conflicts = DeviceConflictDetector(attendance)
        self._default_ttl = int(default_token_ttl_seconds)

    def _get_event(self, event_id: int) -> Event:
        event = self._events.get(int(event_id))
        if not event:
            raise NotFoundError(ErrorCode.EVENT_NOT_FOUND, f"Event {event_id} not found")
        return event

    def actor_for(self, user_id: int, event_id: int) -> ActorContext:
        """Resolve the caller's capabilities on the event's team for this request."""

        event = self._get_event(event_id)
        return self._actors.resolve(int(user_id), event.team_id)

    def check_in(
        self,
        actor: ActorContext,
        event_id: int,
        target_user_id: int,
        method: CheckInMethod,
        evidence: Optional[CheckInEvidence] = None,
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        evidence = evidence or CheckInEvidence()
        target_user_id = int(target_user_id)
        event = self._get_event(event_id)

        decision = self._gate.authorize(
            actor=actor, target_user_id=target_user_id, event=event, method=method, now=now
        )
        if not decision.allowed:
            self._denied("check-in", event.event_id, target_user_id, decision.reason)
            raise AuthorizationError(decision.reason)

        verdict = self._validators.for_method(method).validate(event=event, evidence=evidence, now=now)
        if not verdict.allowed:
            self._denied("check-in", event.event_id, target_user_id, verdict.reason)
            raise EvidenceError(verdict.reason)

        if self._attendance.get_active(event.event_id, target_user_id):
            self._denied("check-in", event.event_id, target_user_id, ErrorCode.DUPLICATE_CHECKIN)
            raise ConflictError(ErrorCode.DUPLICATE_CHECKIN, "Already checked in to this event")

        conflict = self._conflicts.check(
            event_id=event.event_id,
            user_id=target_user_id,
            method=method,
            device_fingerprint=verdict.device_fingerprint,
        )
        if not conflict.allowed:
            self._denied("check-in", event.event_id, target_user_id, conflict.reason)
            raise ConflictError(conflict.reason, "This device already checked in another person")

        punctuality, late_minutes = classify(event.starts_at, now)
        new = NewAttendanceRecord(
            event_id=event.event_id,
            user_id=target_user_id,
            method=method,
            device_fingerprint=verdict.device_fingerprint if method != CheckInMethod.MANUAL else None,
            checked_in_at=now,
            actor_id=actor.user_id,
            punctuality=punctuality,
            late_minutes=late_minutes,
            latitude=verdict.latitude,
            longitude=verdict.longitude,
            distance_meters=verdict.distance_meters,
            is_flagged=verdict.flag_reason is not None,
            flag_reason=verdict.flag_reason,
            note=evidence.note if method == CheckInMethod.MANUAL else None,
        )
        draft = self._audit.draft(
            AuditAction.CREATED,
            actor_id=actor.user_id,
            at=now,
            detail=f"method={method.value}",
        )

        try:
            record = self._attendance.insert_checkin(new, draft)
        except StorageConflict as e:
            code = (
                ErrorCode.DEVICE_ALREADY_USED
                if e.constraint == StorageConflict.ACTIVE_DEVICE
                else ErrorCode.DUPLICATE_CHECKIN
            )
            self._denied("check-in", event.event_id, target_user_id, code)
            raise ConflictError(code) from e

        self._committed(draft, record)
        return record

    def check_out(
        self,
        actor: ActorContext,
        event_id: int,
        target_user_id: int,
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        target_user_id = int(target_user_id)
        event = self._get_event(event_id)

        decision = self._gate.authorize_check_out(actor=actor, target_user_id=target_user_id, event=event)
        if not decision.allowed:
            self._denied("check-out", event.event_id, target_user_id, decision.reason)
            raise AuthorizationError(decision.reason)

        record = self._attendance.get_active(event.event_id, target_user_id)
        self._require_checked_in(record)

        draft = self._audit.draft(AuditAction.CHECKED_OUT, actor_id=actor.user_id, at=now)
        updated = self._attendance.mark_checked_out(record.record_id, now, draft)
        if updated is None:
            # Lost a race with another check-out or a delete; report what won.
            self._require_checked_in(self._attendance.get_active(event.event_id, target_user_id))
            raise StateError(ErrorCode.RECORD_NOT_FOUND)

        self._committed(draft, updated)
        return updated

    @staticmethod
    def _require_checked_in(record: Optional[AttendanceRecord]) -> None:
        if record is None:
            raise StateError(ErrorCode.RECORD_NOT_FOUND, "No attendance record found")
        if record.status == AttendanceStatus.CHECKED_OUT:
            raise StateError(ErrorCode.ALREADY_CHECKED_OUT, "Already checked out of this event")

    def issue_check_in_token(
        self,
        event_id: int,
        actor: ActorContext,
        *,
        now: Optional[datetime] = None,
    ) -> IssuedToken:
        """Mint a fresh QR token; every token issued earlier for the event stops working."""

        now = now or now_local()
        event = self._get_event(event_id)
        if not actor.can(Capability.ISSUE_QR_TOKEN, event.team_id):
            raise AuthorizationError(ErrorCode.NOT_AUTHORIZED, "Only coaches and admins can generate QR codes")

        version = self._events.bump_qr_secret_version(event.event_id)
        ttl = event.qr_token_ttl_seconds or self._default_ttl
        expires_at = now + timedelta(seconds=ttl)
        token = self._codec.mint(event_id=event.event_id, secret_version=version, expires_at=expires_at)

        logger.info("check-in token issued: event=%s version=%s actor=%s", event.event_id, version, actor.user_id)
        return IssuedToken(token=token, expires_at=expires_at, secret_version=version)

    def list_attendance(
        self,
        actor: ActorContext,
        event_id: int,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceRecord]:
        """Team roster for one event; players read their own row through attendance_status."""

        event = self._get_event(event_id)
        if not actor.can(Capability.VIEW_ATTENDANCE, event.team_id):
            raise AuthorizationError(ErrorCode.NOT_AUTHORIZED, "Only coaches and admins can view team attendance")
        return self._attendance.list_for_event(event.event_id, status)

    def attendance_status(self, actor: ActorContext, event_id: int) -> Optional[AttendanceRecord]:
        """The caller's own live record for the event, or None when not checked in."""

        event = self._get_event(event_id)
        return self._attendance.get_active(event.event_id, actor.user_id)

    def history(self, user_id: int, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[AttendanceRecord]:
        since, until = day_bounds(start, end)
        return self._attendance.list_for_user(int(user_id), since, until)

    def delete_record(
        self,
        actor: ActorContext,
        event_id: int,
        record_id: int,
        *,
        reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Administrative correction: soft-delete a record, keeping it for the audit path."""

        now = now or now_local()
        event = self._get_event(event_id)
        if not actor.can(Capability.CORRECT_RECORDS, event.team_id):
            raise AuthorizationError(ErrorCode.NOT_AUTHORIZED)

        record = self._attendance.get_by_id(int(record_id))
        if record is None or record.event_id != event.event_id:
            raise StateError(ErrorCode.RECORD_NOT_FOUND)

        draft = self._audit.draft(AuditAction.DELETED, actor_id=actor.user_id, at=now, detail=reason)
        deleted = self._attendance.soft_delete(record.record_id, now, actor.user_id, draft)
        if deleted is None:
            raise StateError(ErrorCode.RECORD_NOT_FOUND)

        self._committed(draft, deleted)
        return deleted

    def audit_trail(self, actor: ActorContext, event_id: int) -> List[AuditedRecord]:
        event = self._get_event(event_id)
        if not actor.can(Capability.VIEW_AUDIT, event.team_id):
            raise AuthorizationError(ErrorCode.NOT_AUTHORIZED)

        by_record = defaultdict(list)
        for entry in self._audit.trail_for_event(event.event_id):
            by_record[entry.record_id].append(entry)

        return [
            AuditedRecord(record=r, entries=tuple(by_record.get(r.record_id, ())))
            for r in self._attendance.list_for_event_including_deleted(event.event_id)
        ]

    def _committed(self, draft, record: AttendanceRecord) -> None:
        self._audit.committed(
            draft,
            record_id=record.record_id,
            event_id=record.event_id,
            user_id=record.user_id,
            status="deleted" if record.is_deleted else record.status.value,
        )

    @staticmethod
    def _denied(operation: str, event_id: int, user_id: int, code: Optional[ErrorCode]) -> None:
        logger.info("%s denied: event=%s user=%s code=%s", operation, event_id, user_id, code.value if code else None)

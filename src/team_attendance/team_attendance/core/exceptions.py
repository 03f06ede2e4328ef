from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Stable names returned to callers for every failure."""

    # authorization
    NOT_IN_ASSIGNED_GROUP = "NOT_IN_ASSIGNED_GROUP"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    OUTSIDE_TIME_WINDOW = "OUTSIDE_TIME_WINDOW"
    METHOD_NOT_ENABLED = "METHOD_NOT_ENABLED"

    # evidence validation
    QR_EXPIRED = "QR_EXPIRED"
    QR_INVALID_SIGNATURE = "QR_INVALID_SIGNATURE"
    QR_EVENT_MISMATCH = "QR_EVENT_MISMATCH"
    QR_STALE_VERSION = "QR_STALE_VERSION"
    OUTSIDE_RADIUS = "OUTSIDE_RADIUS"
    NO_POSITION_SIGNAL = "NO_POSITION_SIGNAL"
    LOCATION_NOT_CONFIGURED = "LOCATION_NOT_CONFIGURED"
    MISSING_DEVICE_FINGERPRINT = "MISSING_DEVICE_FINGERPRINT"

    # conflict
    DEVICE_ALREADY_USED = "DEVICE_ALREADY_USED"
    DUPLICATE_CHECKIN = "DUPLICATE_CHECKIN"

    # state
    ALREADY_CHECKED_OUT = "ALREADY_CHECKED_OUT"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"


class DomainError(Exception):
    """Base exception for business rule violations."""

    default_code = ErrorCode.INVALID_INPUT

    def __init__(self, code: ErrorCode | None = None, message: str | None = None):
        self.code = code or self.default_code
        self.message = message or self.code.value
        super().__init__(self.message)


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    default_code = ErrorCode.NOT_AUTHORIZED


class EvidenceError(DomainError):
    """Raised when QR, position or device evidence fails verification."""


class ConflictError(DomainError):
    """Raised when a check-in collides with an existing active record."""

    default_code = ErrorCode.DUPLICATE_CHECKIN


class StateError(DomainError):
    """Raised when a record is not in a state that allows the transition."""

    default_code = ErrorCode.RECORD_NOT_FOUND


class NotFoundError(DomainError):
    default_code = ErrorCode.EVENT_NOT_FOUND


class StorageConflict(Exception):
    """Raised by repositories when a partial-uniqueness key rejects a write."""

    ACTIVE_RECORD = "active_record"
    ACTIVE_DEVICE = "active_device"

    def __init__(self, constraint: str):
        self.constraint = constraint
        super().__init__(f"uniqueness violated: {constraint}")

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from ..core.enums import CheckInMethod
from .tokens import CheckInTokenCodec
from .validators.base import CheckInValidator
from .validators.geofence_validator import GeofenceValidator
from .validators.manual_validator import ManualValidator
from .validators.qr_validator import QrValidator


@dataclass
class ValidatorFactory:
    """Factory Pattern: choose the evidence validator for a check-in method."""

    codec: CheckInTokenCodec
    max_accuracy_meters: float
    _validators: Dict[CheckInMethod, CheckInValidator] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._validators = {
            CheckInMethod.QR: QrValidator(self.codec),
            CheckInMethod.LOCATION: GeofenceValidator(max_accuracy_meters=self.max_accuracy_meters),
            CheckInMethod.MANUAL: ManualValidator(),
        }

    def for_method(self, method: CheckInMethod) -> CheckInValidator:
        return self._validators[method]

"""Signed, event-bound check-in tokens (the payload behind a QR code)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from itsdangerous import BadData, URLSafeSerializer

from ..core.constants import QR_TOKEN_SALT


class InvalidToken(Exception):
    """Token could not be decoded or its signature does not match."""


@dataclass(frozen=True)
class TokenClaims:
    event_id: int
    secret_version: int
    expires_at: datetime


class CheckInTokenCodec:
    def __init__(self, secret: str):
        self._serializer = URLSafeSerializer(secret, salt=QR_TOKEN_SALT)

    def mint(self, *, event_id: int, secret_version: int, expires_at: datetime) -> str:
        return self._serializer.dumps(
            {"e": int(event_id), "v": int(secret_version), "x": expires_at.isoformat()}
        )

    def decode(self, token: str) -> TokenClaims:
        try:
            payload = self._serializer.loads(token)
            return TokenClaims(
                event_id=int(payload["e"]),
                secret_version=int(payload["v"]),
                expires_at=datetime.fromisoformat(payload["x"]),
            )
        except (BadData, KeyError, TypeError, ValueError) as e:
            raise InvalidToken(str(e)) from e

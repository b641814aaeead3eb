"""Token payload and token errors."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any


class TokenError(Exception):
    """Base class of token verification errors."""

    default_message = "token error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class ExpiredTokenError(TokenError):
    """The token is past its expiry time."""

    default_message = "token has expired"


class InvalidTokenError(TokenError):
    """The token cannot be decoded or authenticated."""

    default_message = "invalid token"


def _parse_time(value: Any) -> datetime:
    if not isinstance(value, str):
        raise TypeError(f"expected a timestamp string, got {type(value).__name__}")
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class Payload:
    """Claims carried by an access token."""

    id: uuid.UUID
    email: str
    issued_at: datetime
    expired_at: datetime

    def valid(self) -> None:
        """Raise :class:`ExpiredTokenError` if the payload has expired."""
        if datetime.now(timezone.utc) > self.expired_at:
            raise ExpiredTokenError()

    def to_dict(self) -> dict[str, str]:
        return {
            "id": str(self.id),
            "email": self.email,
            "issued_at": self.issued_at.isoformat(),
            "expired_at": self.expired_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> Payload:
        try:
            email = data["email"]
            if not isinstance(email, str):
                raise TypeError("email must be a string")
            return cls(
                id=uuid.UUID(data["id"]),
                email=email,
                issued_at=_parse_time(data["issued_at"]),
                expired_at=_parse_time(data["expired_at"]),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise InvalidTokenError() from exc


def new_payload(email: str, duration: timedelta) -> Payload:
    """Create a payload for *email* that is valid for *duration*."""
    now = datetime.now(timezone.utc)
    return Payload(id=uuid.uuid1(), email=email, issued_at=now, expired_at=now + duration)
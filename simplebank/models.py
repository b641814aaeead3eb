"""Records stored by the bank and the currencies it supports."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any


class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    KRW = "KRW"
    JPY = "JPY"

    def __str__(self) -> str:
        return self.value


def scan_currency(src: Any) -> Currency:
    """Convert a database value (text or bytes) into a :class:`Currency`."""
    if isinstance(src, (bytes, bytearray, memoryview)):
        src = bytes(src).decode("utf-8")
    elif not isinstance(src, str):
        raise TypeError(f"unsupported scan type for Currency: {type(src).__name__}")
    try:
        return Currency(src)
    except ValueError:
        raise ValueError(f"invalid currency: {src!r}") from None


def all_currency_values() -> list[Currency]:
    return [Currency.USD, Currency.EUR, Currency.KRW, Currency.JPY]


@dataclass(frozen=True)
class NullCurrency:
    """A currency that may be NULL."""

    currency: Currency | None = field(default=None, metadata={"json": "Currency"})
    valid: bool = False

    @classmethod
    def scan(cls, value: Any) -> NullCurrency:
        if value is None:
            return cls()
        return cls(currency=scan_currency(value), valid=True)

    def value(self) -> str | None:
        if not self.valid or self.currency is None:
            return None
        return self.currency.value


@dataclass(frozen=True)
class Account:
    id: int
    owner_id: int
    currency: Currency
    created_at: datetime
    money: int
    country_code: int


@dataclass(frozen=True)
class Entry:
    id: int
    account_id: int
    amount: int  # negative or positive
    created_at: datetime


@dataclass(frozen=True)
class Owner:
    id: int
    first_name: str
    first_surname: str
    second_surname: str
    born_at: datetime
    nationality: int
    hashed_password: str
    email: str
    created_at: datetime
    password_changed_at: datetime


@dataclass(frozen=True)
class Session:
    id: uuid.UUID
    owner_id: int
    email: str
    refresh_token: str
    user_agent: str
    client_ip: str
    is_blocked: bool
    created_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class Transfer:
    id: int
    from_account_id: int
    to_account_id: int
    amount: int  # always positive
    created_at: datetime


def _format_time(value: datetime) -> str:
    text = value.replace(microsecond=0, tzinfo=None).isoformat()
    fraction = f"{value.microsecond:06d}".rstrip("0")
    if fraction:
        text += "." + fraction
    offset = value.utcoffset()
    if offset is None:
        return text
    if not offset:
        return text + "Z"
    return text + value.isoformat()[len(value.replace(tzinfo=None).isoformat()):]


def _json_value(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return to_json_dict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return _format_time(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_json_value(item) for item in value]
    if isinstance(value, dict):
        return {key: _json_value(item) for key, item in value.items()}
    return value


def to_json_dict(record: Any) -> dict[str, Any]:
    """Return a JSON-ready dictionary of a record, recursing into nested records."""
    if not is_dataclass(record) or isinstance(record, type):
        raise TypeError(f"expected a record instance, got {type(record).__name__}")
    return {
        f.metadata.get("json", f.name): _json_value(getattr(record, f.name))
        for f in fields(record)
    }
"""Application settings loaded from an ``app.env`` file and the environment."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from pathlib import Path

CONFIG_NAME = "app"
CONFIG_TYPE = "env"

_UNIT_NANOS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_UNIT_CHARS = "nsuµμmh"


@dataclass(frozen=True)
class Config:
    """Runtime settings of the bank server."""

    db_driver: str = ""
    db_source: str = ""
    server_address: str = ""
    token_duration: timedelta = timedelta(0)
    token_symmetric_key: str = ""
    refresh_token_duration: timedelta = timedelta(0)


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``15m``, ``1h30m`` or ``-1.5h``.

    A bare number without a unit counts as nanoseconds.
    """
    value = text.strip()
    if not value:
        raise ValueError(f"time: invalid duration {text!r}")
    if not any(char in value for char in _UNIT_CHARS):
        value += "ns"

    sign = 1
    if value[0] in "+-":
        sign = -1 if value[0] == "-" else 1
        value = value[1:]
    if value == "0":
        return timedelta(0)
    if not value:
        raise ValueError(f"time: invalid duration {text!r}")

    total = Decimal(0)
    pos = 0
    while pos < len(value):
        match = _COMPONENT.match(value, pos)
        if match is None:
            raise ValueError(f"time: invalid duration {text!r}")
        total += Decimal(match.group(1)) * _UNIT_NANOS[match.group(2)]
        pos = match.end()

    nanos = int(total)
    return timedelta(microseconds=sign * (nanos // 1000))


def _strip_value(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        return value[1:-1]
    comment = value.find(" #")
    if comment != -1:
        value = value[:comment].rstrip()
    return value


def _read_env_file(path: Path) -> dict[str, str]:
    values: dict[str, str] = {}
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        key, sep, value = line.partition("=")
        if not sep:
            key, sep, value = line.partition(":")
        if not sep or not key.strip():
            raise ValueError(f"invalid line in {path}: {raw!r}")
        values[key.strip().upper()] = _strip_value(value)
    return values


def load_config(path: str | os.PathLike = ".") -> Config:
    """Read ``app.env`` from *path*; non-empty environment variables take precedence."""
    file = Path(path) / f"{CONFIG_NAME}.{CONFIG_TYPE}"
    if not file.is_file():
        raise FileNotFoundError(f'Config File "{CONFIG_NAME}" Not Found in "{Path(path)}"')
    values = _read_env_file(file)

    def lookup(key: str) -> str:
        env = os.environ.get(key)
        if env:
            return env
        return values.get(key, "")

    def duration(key: str) -> timedelta:
        raw = lookup(key)
        return parse_duration(raw) if raw else timedelta(0)

    return Config(
        db_driver=lookup("DB_DRIVER"),
        db_source=lookup("DB_SOURCE"),
        server_address=lookup("SERVER_ADDRESS"),
        token_duration=duration("TOKEN_DURATION"),
        token_symmetric_key=lookup("TOKEN_SYMMETRIC_KEY"),
        refresh_token_duration=duration("REFRESH_TOKEN_DURATION"),
    )
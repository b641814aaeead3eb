"""Typed queries over the bank's tables, backed by a SQLite connection."""

from __future__ import annotations

import sqlite3
import uuid
from datetime import date, datetime, time, timezone
from typing import Any, Callable, Sequence, TypeVar

from simplebank.models import Account, Currency, Entry, Owner, Session, Transfer, scan_currency

T = TypeVar("T")

SCHEMA = """
PRAGMA foreign_keys = ON;

CREATE TABLE IF NOT EXISTS owners (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    first_name TEXT NOT NULL,
    first_surname TEXT NOT NULL,
    second_surname TEXT NOT NULL,
    born_at TEXT NOT NULL,
    nationality INTEGER NOT NULL,
    hashed_password TEXT NOT NULL,
    email TEXT NOT NULL UNIQUE,
    created_at TEXT NOT NULL,
    password_changed_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS accounts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    owner_id INTEGER NOT NULL REFERENCES owners (id),
    currency TEXT NOT NULL CHECK (currency IN ('USD', 'EUR', 'KRW', 'JPY')),
    created_at TEXT NOT NULL,
    money INTEGER NOT NULL,
    country_code INTEGER NOT NULL
);
CREATE INDEX IF NOT EXISTS accounts_owner_id_idx ON accounts (owner_id);

CREATE TABLE IF NOT EXISTS entries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    account_id INTEGER NOT NULL REFERENCES accounts (id),
    amount INTEGER NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS entries_account_id_idx ON entries (account_id);

CREATE TABLE IF NOT EXISTS transfers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    from_account_id INTEGER NOT NULL REFERENCES accounts (id),
    to_account_id INTEGER NOT NULL REFERENCES accounts (id),
    amount INTEGER NOT NULL CHECK (amount > 0),
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS sessions (
    id TEXT PRIMARY KEY,
    owner_id INTEGER NOT NULL REFERENCES owners (id),
    email TEXT NOT NULL,
    refresh_token TEXT NOT NULL,
    user_agent TEXT NOT NULL,
    client_ip TEXT NOT NULL,
    is_blocked INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    expires_at TEXT NOT NULL
);
"""

_ACCOUNT_COLUMNS = "id, owner_id, currency, created_at, money, country_code"
_ENTRY_COLUMNS = "id, account_id, amount, created_at"
_OWNER_COLUMNS = (
    "id, first_name, first_surname, second_surname, born_at, nationality, "
    "hashed_password, email, created_at, password_changed_at"
)
_SESSION_COLUMNS = (
    "id, owner_id, email, refresh_token, user_agent, client_ip, is_blocked, created_at, expires_at"
)
_TRANSFER_COLUMNS = "id, from_account_id, to_account_id, amount, created_at"


class NoRowsError(LookupError):
    """A query that returns one row found none."""

    def __init__(self, message: str = "sql: no rows in result set"):
        super().__init__(message)


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the bank's tables on *conn* if they do not exist."""
    conn.executescript(SCHEMA)
    conn.execute("PRAGMA foreign_keys = ON")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _time_to_db(value: datetime | date) -> str:
    if not isinstance(value, datetime):
        value = datetime.combine(value, time(), tzinfo=timezone.utc)
    return value.isoformat()


def _time_from_db(value: str) -> datetime:
    return datetime.fromisoformat(value)


def _account(row: Sequence[Any]) -> Account:
    return Account(
        id=row[0],
        owner_id=row[1],
        currency=scan_currency(row[2]),
        created_at=_time_from_db(row[3]),
        money=row[4],
        country_code=row[5],
    )


def _entry(row: Sequence[Any]) -> Entry:
    return Entry(id=row[0], account_id=row[1], amount=row[2], created_at=_time_from_db(row[3]))


def _owner(row: Sequence[Any]) -> Owner:
    return Owner(
        id=row[0],
        first_name=row[1],
        first_surname=row[2],
        second_surname=row[3],
        born_at=_time_from_db(row[4]),
        nationality=row[5],
        hashed_password=row[6],
        email=row[7],
        created_at=_time_from_db(row[8]),
        password_changed_at=_time_from_db(row[9]),
    )


def _session(row: Sequence[Any]) -> Session:
    return Session(
        id=uuid.UUID(row[0]),
        owner_id=row[1],
        email=row[2],
        refresh_token=row[3],
        user_agent=row[4],
        client_ip=row[5],
        is_blocked=bool(row[6]),
        created_at=_time_from_db(row[7]),
        expires_at=_time_from_db(row[8]),
    )


def _transfer(row: Sequence[Any]) -> Transfer:
    return Transfer(
        id=row[0],
        from_account_id=row[1],
        to_account_id=row[2],
        amount=row[3],
        created_at=_time_from_db(row[4]),
    )


class Queries:
    """Runs the bank's queries on a connection or an open transaction.

    Statements are not committed here: use an autocommit connection, or let
    the caller own the transaction.
    """

    def __init__(self, db: sqlite3.Connection):
        self._db = db

    def _one(self, sql: str, params: Sequence[Any], convert: Callable[[Sequence[Any]], T]) -> T:
        row = self._db.execute(sql, params).fetchone()
        if row is None:
            raise NoRowsError()
        return convert(row)

    def _many(self, sql: str, params: Sequence[Any], convert: Callable[[Sequence[Any]], T]) -> list[T]:
        return [convert(row) for row in self._db.execute(sql, params).fetchall()]

    # accounts

    def add_account_balance(self, account_id: int, amount: int) -> Account:
        cursor = self._db.execute(
            "UPDATE accounts SET money = money + ? WHERE id = ?", (amount, account_id)
        )
        if cursor.rowcount == 0:
            raise NoRowsError()
        return self.get_account(account_id)

    def create_account(
        self, owner_id: int, currency: Currency | str, money: int, country_code: int
    ) -> Account:
        cursor = self._db.execute(
            "INSERT INTO accounts (owner_id, currency, created_at, money, country_code) "
            "VALUES (?, ?, ?, ?, ?)",
            (owner_id, scan_currency(currency).value, _time_to_db(_now()), money, country_code),
        )
        return self.get_account(cursor.lastrowid)

    def delete_account(self, account_id: int) -> None:
        self._db.execute("DELETE FROM accounts WHERE id = ?", (account_id,))

    def get_account(self, account_id: int) -> Account:
        return self._one(
            f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE id = ? LIMIT 1", (account_id,), _account
        )

    def get_account_for_update(self, account_id: int) -> Account:
        # SQLite locks the whole database for writes, so a plain read suffices.
        return self.get_account(account_id)

    def list_account(self, owner_id: int, limit: int, offset: int) -> list[Account]:
        return self._many(
            f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE owner_id = ? "
            "ORDER BY id LIMIT ? OFFSET ?",
            (owner_id, limit, offset),
            _account,
        )

    def update_account(self, account_id: int, money: int) -> Account:
        cursor = self._db.execute("UPDATE accounts SET money = ? WHERE id = ?", (money, account_id))
        if cursor.rowcount == 0:
            raise NoRowsError()
        return self.get_account(account_id)

    # entries

    def create_entry(self, account_id: int, amount: int) -> Entry:
        cursor = self._db.execute(
            "INSERT INTO entries (account_id, amount, created_at) VALUES (?, ?, ?)",
            (account_id, amount, _time_to_db(_now())),
        )
        return self.get_entry(cursor.lastrowid)

    def get_entry(self, entry_id: int) -> Entry:
        return self._one(
            f"SELECT {_ENTRY_COLUMNS} FROM entries WHERE id = ? LIMIT 1", (entry_id,), _entry
        )

    def list_entries(self, account_id: int, limit: int, offset: int) -> list[Entry]:
        return self._many(
            f"SELECT {_ENTRY_COLUMNS} FROM entries WHERE account_id = ? "
            "ORDER BY created_at, id LIMIT ? OFFSET ?",
            (account_id, limit, offset),
            _entry,
        )

    # owners

    def create_owner(
        self,
        first_name: str,
        first_surname: str,
        second_surname: str,
        born_at: datetime | date,
        nationality: int,
        hashed_password: str,
        email: str,
    ) -> Owner:
        now = _time_to_db(_now())
        cursor = self._db.execute(
            "INSERT INTO owners (first_name, first_surname, second_surname, born_at, nationality, "
            "hashed_password, email, created_at, password_changed_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                first_name,
                first_surname,
                second_surname,
                _time_to_db(born_at),
                nationality,
                hashed_password,
                email,
                now,
                now,
            ),
        )
        return self.get_owner(cursor.lastrowid)

    def get_owner(self, owner_id: int) -> Owner:
        return self._one(
            f"SELECT {_OWNER_COLUMNS} FROM owners WHERE id = ? LIMIT 1", (owner_id,), _owner
        )

    def get_owner_by_email(self, email: str) -> Owner:
        return self._one(
            f"SELECT {_OWNER_COLUMNS} FROM owners WHERE email = ? LIMIT 1", (email,), _owner
        )

    # sessions

    def create_session(
        self,
        session_id: uuid.UUID,
        owner_id: int,
        refresh_token: str,
        client_ip: str,
        user_agent: str,
        is_blocked: bool,
        expires_at: datetime,
        email: str,
    ) -> Session:
        self._db.execute(
            "INSERT INTO sessions (id, owner_id, refresh_token, client_ip, user_agent, "
            "is_blocked, expires_at, email, created_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                str(session_id),
                owner_id,
                refresh_token,
                client_ip,
                user_agent,
                int(is_blocked),
                _time_to_db(expires_at),
                email,
                _time_to_db(_now()),
            ),
        )
        return self.get_session(session_id)

    def get_session(self, session_id: uuid.UUID) -> Session:
        return self._one(
            f"SELECT {_SESSION_COLUMNS} FROM sessions WHERE id = ? LIMIT 1",
            (str(session_id),),
            _session,
        )

    # transfers

    def create_transfer(self, from_account_id: int, to_account_id: int, amount: int) -> Transfer:
        cursor = self._db.execute(
            "INSERT INTO transfers (from_account_id, to_account_id, amount, created_at) "
            "VALUES (?, ?, ?, ?)",
            (from_account_id, to_account_id, amount, _time_to_db(_now())),
        )
        return self.get_transfer(cursor.lastrowid)

    def get_transfer(self, transfer_id: int) -> Transfer:
        return self._one(
            f"SELECT {_TRANSFER_COLUMNS} FROM transfers WHERE id = ? LIMIT 1",
            (transfer_id,),
            _transfer,
        )

    def list_transfers(self, limit: int, offset: int) -> list[Transfer]:
        return self._many(
            f"SELECT {_TRANSFER_COLUMNS} FROM transfers ORDER BY created_at, id LIMIT ? OFFSET ?",
            (limit, offset),
            _transfer,
        )
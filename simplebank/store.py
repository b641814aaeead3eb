"""Bank store: the typed queries plus multi-statement transactions."""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from simplebank.models import Account, Entry, Transfer
from simplebank.queries import Queries


@dataclass(frozen=True)
class TransferTxResult:
    """Everything a money transfer created or changed."""

    transfer: Transfer
    from_account: Account
    to_account: Account
    from_entry: Entry
    to_entry: Entry


def _transfer_money(
    queries: Queries, account_id1: int, amount1: int, account_id2: int, amount2: int
) -> tuple[Account, Account]:
    account1 = queries.add_account_balance(account_id1, amount1)
    account2 = queries.add_account_balance(account_id2, amount2)
    return account1, account2


class Store(Queries):
    """Runs queries on a SQLite connection and groups them into transactions.

    The connection is switched to autocommit mode so that transactions are
    opened and closed explicitly by :meth:`transaction`.
    """

    def __init__(self, db: sqlite3.Connection):
        super().__init__(db)
        db.isolation_level = None
        self._tx_lock = threading.Lock()

    @contextmanager
    def transaction(self) -> Iterator[Queries]:
        """Yield queries bound to a transaction; commit on success, roll back on error."""
        with self._tx_lock:
            self._db.execute("BEGIN IMMEDIATE")
            try:
                yield Queries(self._db)
            except BaseException:
                self._db.execute("ROLLBACK")
                raise
            else:
                self._db.execute("COMMIT")

    def transfer_tx(self, from_account_id: int, to_account_id: int, amount: int) -> TransferTxResult:
        """Move *amount* between two accounts, recording the transfer and both entries."""
        with self.transaction() as q:
            transfer = q.create_transfer(from_account_id, to_account_id, amount)
            from_entry = q.create_entry(from_account_id, -amount)
            to_entry = q.create_entry(to_account_id, amount)

            # Update the lower id first so concurrent transfers lock in the same order.
            if from_account_id < to_account_id:
                from_account, to_account = _transfer_money(
                    q, from_account_id, -amount, to_account_id, amount
                )
            else:
                to_account, from_account = _transfer_money(
                    q, to_account_id, amount, from_account_id, -amount
                )

        return TransferTxResult(
            transfer=transfer,
            from_account=from_account,
            to_account=to_account,
            from_entry=from_entry,
            to_entry=to_entry,
        )
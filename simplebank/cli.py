"""Command that loads the configuration and serves the bank API."""

from __future__ import annotations

import argparse
import sqlite3
from typing import Sequence

from simplebank.config import load_config
from simplebank.queries import create_schema
from simplebank.server import Server
from simplebank.store import Store

SUPPORTED_DRIVERS = ("sqlite", "sqlite3")


def main(argv: Sequence[str] | None = None) -> None:
    """Start the bank HTTP server; exit with a message on any startup failure."""
    parser = argparse.ArgumentParser(prog="simplebank", description="Run the bank HTTP server.")
    parser.add_argument(
        "config_dir", nargs="?", default=".", help="directory that holds app.env"
    )
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config_dir)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"cannot load configuration: {exc}") from exc

    if config.db_driver not in SUPPORTED_DRIVERS:
        raise SystemExit(
            f"cannot connect to the database: unsupported driver {config.db_driver!r}"
        )
    try:
        conn = sqlite3.connect(config.db_source, check_same_thread=False, isolation_level=None)
        create_schema(conn)
    except sqlite3.Error as exc:
        raise SystemExit(f"cannot connect to the database: {exc}") from exc

    try:
        try:
            server = Server(config, Store(conn))
        except ValueError as exc:
            raise SystemExit(f"cannot start the server: {exc}") from exc
        try:
            server.start(config.server_address)
        except (OSError, ValueError) as exc:
            raise SystemExit(f"cannot start the server: {exc}") from exc
    finally:
        conn.close()


if __name__ == "__main__":
    main()
import sqlite3
from unittest import mock

import pytest

from simplebank.cli import main
from simplebank.random_utils import random_string

ENV_KEYS = (
    "DB_DRIVER",
    "DB_SOURCE",
    "SERVER_ADDRESS",
    "TOKEN_DURATION",
    "TOKEN_SYMMETRIC_KEY",
    "REFRESH_TOKEN_DURATION",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def write_env(directory, driver, db_path, symmetric_key, address="127.0.0.1:8099"):
    (directory / "app.env").write_text(
        f"DB_DRIVER={driver}\n"
        f"DB_SOURCE={db_path}\n"
        f"SERVER_ADDRESS={address}\n"
        "TOKEN_DURATION=15m\n"
        f"TOKEN_SYMMETRIC_KEY={symmetric_key}\n",
        encoding="utf-8",
    )


def test_missing_config(tmp_path):
    with pytest.raises(SystemExit, match="cannot load configuration"):
        main([str(tmp_path)])


def test_unsupported_driver(tmp_path):
    write_env(tmp_path, "postgres", tmp_path / "bank.db", random_string(32))
    with pytest.raises(SystemExit, match="unsupported driver 'postgres'"):
        main([str(tmp_path)])


def test_bad_token_key(tmp_path):
    write_env(tmp_path, "sqlite", tmp_path / "bank.db", random_string(10))
    with pytest.raises(SystemExit, match="cannot create token maker"):
        main([str(tmp_path)])


def test_bad_address(tmp_path):
    write_env(tmp_path, "sqlite", tmp_path / "bank.db", random_string(32), address="localhost")
    with mock.patch("flask.Flask.run") as run:
        with pytest.raises(SystemExit, match="missing port"):
            main([str(tmp_path)])
    run.assert_not_called()


def test_starts_server(tmp_path):
    db_path = tmp_path / "bank.db"
    write_env(tmp_path, "sqlite", db_path, random_string(32))
    with mock.patch("flask.Flask.run") as run:
        main([str(tmp_path)])
    run.assert_called_once()
    assert run.call_args.kwargs["host"] == "127.0.0.1"
    assert run.call_args.kwargs["port"] == 8099

    conn = sqlite3.connect(db_path)
    try:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    finally:
        conn.close()
    assert {"owners", "accounts", "entries", "transfers", "sessions"} <= tables
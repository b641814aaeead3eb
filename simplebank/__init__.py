"""A small banking service on SQLite: accounts, transfers and a token-authenticated HTTP API."""

__version__ = "0.1.0"
# simplebank

A small banking service on SQLite. Owners hold accounts in one of four
currencies (USD, EUR, KRW, JPY) and move money between them. Every transfer
is recorded in one transaction as a transfer row, a debit entry and a credit
entry, and both account balances are updated in that same transaction.

Accounts and transfers are served over HTTP with Flask. Every route requires
a bearer token issued by a PASETO v2.local token maker; a JWT maker with the
same interface is also included.

## Installation

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Configuration

`simplebank.config.load_config(path)` reads a file named `app.env` from
`path`; a non-empty environment variable of the same name takes precedence
over the file. A missing `app.env` raises `FileNotFoundError`.

```
DB_DRIVER=sqlite
DB_SOURCE=simplebank.db
SERVER_ADDRESS=0.0.0.0:8080
TOKEN_SYMMETRIC_KEY=placeholder
TOKEN_DURATION=15m
REFRESH_TOKEN_DURATION=24h
```

- `DB_DRIVER` must be `sqlite` or `sqlite3`; `DB_SOURCE` is the SQLite
  database file.
- `TOKEN_SYMMETRIC_KEY` must be exactly 32 characters; replace the
  placeholder with a key of your own.
- Durations are parsed by `simplebank.config.parse_duration`: units `ns`,
  `us`, `ms`, `s`, `m`, `h`, combinable and signed (`1h30m`, `-1.5h`); a bare
  number counts as nanoseconds.
- An empty `SERVER_ADDRESS` serves on `0.0.0.0` and the port in the `PORT`
  environment variable, or 8080.

## Running the server

```
simplebank [CONFIG_DIR]
```

This loads `app.env` from `CONFIG_DIR` (default: the current directory),
opens the SQLite database, creates the tables if they do not exist, and
serves the API on `SERVER_ADDRESS`. Any startup failure ends the command
with a message.

## HTTP API

Every route expects `Authorization: Bearer token`, where the token is one
issued by a `PasetoMaker` built from `TOKEN_SYMMETRIC_KEY`, for the e-mail
address of an existing owner.

| Method | Path             | Purpose                                                     |
|--------|------------------|-------------------------------------------------------------|
| POST   | `/accounts`      | open an account: JSON `currency`, `country_code`            |
| GET    | `/accounts/<id>` | fetch one of your accounts                                  |
| GET    | `/accounts`      | list your accounts: query `page_id` (≥ 1), `page_size` (5–10) |
| POST   | `/transfers`     | JSON `from_account_id`, `to_account_id`, `amount`, `currency` |

New accounts start with a balance of 0. A transfer must come from one of
your own accounts, both accounts must be in the given currency, and the
source balance must be greater than the amount.

Errors come back as `{"error": "..."}`:

- 400: malformed body or query, a missing field, an out-of-range value;
- 401: missing, malformed, invalid or expired token; an account that is
  not yours on `GET /accounts/<id>`;
- 403: a database constraint violation when opening an account; a transfer
  from an account that is not yours;
- 404: the owner or account does not exist;
- 422: currency mismatch on a transfer, or not enough money;
- 500: any other failure.

A transfer whose source or destination account cannot be read answers 204
with an empty body.

## Using the library

Storage and transfers:

```python
import sqlite3
from datetime import date

from simplebank.password import hash_password
from simplebank.queries import create_schema
from simplebank.store import Store

conn = sqlite3.connect("simplebank.db", check_same_thread=False, isolation_level=None)
create_schema(conn)
store = Store(conn)

password = "password"
owner = store.create_owner(
    "Ada", "Example", "Sample", date(1990, 1, 1), 34, hash_password(password), "ada@example.com"
)
source = store.create_account(owner.id, "EUR", 100, 34)
target = store.create_account(owner.id, "EUR", 0, 34)

result = store.transfer_tx(source.id, target.id, 10)
print(result.from_account.money, result.to_account.money)  # 90 10
```

`Queries` runs single statements and raises `NoRowsError` when a lookup
finds nothing. `Store` adds `transaction()`, a context manager that commits
on success and rolls back on error, and `transfer_tx`.

Tokens and passwords:

```python
import secrets
from datetime import timedelta

from simplebank.paseto_maker import PasetoMaker
from simplebank.password import PasswordMismatchError, check_password, hash_password

maker = PasetoMaker(secrets.token_hex(16))  # a 32-character key
token, payload = maker.create_token("ada@example.com", timedelta(minutes=15))
assert maker.verify_token(token).email == "ada@example.com"

password = "password"
hashed = hash_password(password)
check_password(password, hashed)  # raises PasswordMismatchError on mismatch
```

`verify_token` raises `ExpiredTokenError` or `InvalidTokenError` (both
`TokenError`, from `simplebank.payload`). `JWTMaker` works the same way,
with a secret of at least 32 characters.

Serving from code: `Server(config, store)` builds the Flask application
(`Server.app`) and its token maker (`Server.token_maker`);
`Server.start(address)` runs it.

## What it does not do

- There are no HTTP routes to register owners, log in or renew tokens.
  Owners are created through `Queries.create_owner`, and access tokens are
  issued in code with a `PasetoMaker` holding the server's key.
- Storage is SQLite only; no other database driver is supported.
- The `sessions` table and the `create_session` / `get_session` queries
  exist, but nothing in the HTTP API uses them.
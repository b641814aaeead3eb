"""HTTP API of the bank."""

from __future__ import annotations

import functools
import os
import re
import sqlite3
from http import HTTPStatus
from typing import Any, Callable

from flask import Flask, g, jsonify, request

from simplebank.config import Config
from simplebank.middleware import AUTHORIZATION_PAYLOAD_KEY, auth_required
from simplebank.models import Account, Currency, Owner, scan_currency, to_json_dict
from simplebank.paseto_maker import PasetoMaker
from simplebank.queries import NoRowsError

_INT_TEXT = re.compile(r"[+-]?\d+")
_DEFAULT_PORT = 8080


class _HTTPError(Exception):
    def __init__(self, status: HTTPStatus, error: Any):
        super().__init__(str(error))
        self.status = status
        self.error = error


def error_response(err: Any) -> dict[str, str]:
    """Return the JSON body used for error replies."""
    return {"error": str(err)}


def validate_currency(value: Any) -> bool:
    """Tell whether *value* names a supported currency."""
    if not isinstance(value, str):
        return False
    try:
        scan_currency(value)
    except ValueError:
        return False
    return True


def _bad_request(message: str) -> _HTTPError:
    return _HTTPError(HTTPStatus.BAD_REQUEST, message)


def _check_range(name: str, value: int, bits: int) -> int:
    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        raise _bad_request(f"{name}: value out of range")
    return value


def _check(name: str, value: int, *, minimum: int | None = None, maximum: int | None = None) -> int:
    if value == 0:
        raise _bad_request(f"{name} is required")
    if minimum is not None and value < minimum:
        raise _bad_request(f"{name} must be at least {minimum}")
    if maximum is not None and value > maximum:
        raise _bad_request(f"{name} must be at most {maximum}")
    return value


def _json_body() -> dict[str, Any]:
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        raise _bad_request("request body must be a JSON object")
    return data


def _json_int(data: dict[str, Any], name: str, bits: int = 64) -> int:
    value = data.get(name)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise _bad_request(f"{name} must be an integer")
    return _check_range(name, value, bits)


def _text_int(raw: str | None, name: str, bits: int = 64) -> int:
    if not raw:
        return 0
    if not _INT_TEXT.fullmatch(raw):
        raise _bad_request(f"{name} must be an integer")
    return _check_range(name, int(raw), bits)


def _currency_field(data: dict[str, Any], name: str = "currency") -> Currency:
    value = data.get(name)
    if value is None or value == "":
        raise _bad_request(f"{name} is required")
    if not validate_currency(value):
        raise _bad_request(f"{name} is not a supported currency")
    return scan_currency(value)


def _fetch(call: Callable[..., Any], *args: Any) -> Any:
    try:
        return call(*args)
    except NoRowsError as exc:
        raise _HTTPError(HTTPStatus.NOT_FOUND, exc) from exc
    except Exception as exc:
        raise _HTTPError(HTTPStatus.INTERNAL_SERVER_ERROR, exc) from exc


def _responds(view: Callable[..., Any]) -> Callable[..., Any]:
    @functools.wraps(view)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return view(*args, **kwargs)
        except _HTTPError as exc:
            if exc.status == HTTPStatus.NO_CONTENT:
                return "", HTTPStatus.NO_CONTENT
            return jsonify(error_response(exc.error)), exc.status

    return wrapper


def _split_address(address: str) -> tuple[str, int]:
    if not address:
        return "0.0.0.0", int(os.environ.get("PORT") or _DEFAULT_PORT)
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"missing port in address {address!r}")
    host = host.strip("[]") or "0.0.0.0"
    return host, int(port)


class Server:
    """Serves the bank's HTTP API over a store."""

    def __init__(self, config: Config, store: Any):
        try:
            token_maker = PasetoMaker(config.token_symmetric_key)
        except ValueError as exc:
            raise ValueError(f"cannot create token maker: {exc}") from exc
        self.config = config
        self.store = store
        self.token_maker = token_maker
        self.app = Flask(__name__)
        self._register_routes()

    def _register_routes(self) -> None:
        auth = auth_required(self.token_maker)
        routes = [
            ("/accounts", "create_account", self._create_account, "POST"),
            ("/accounts/<account_id>", "get_account", self._get_account, "GET"),
            ("/accounts", "list_account", self._list_account, "GET"),
            ("/transfers", "create_transfer", self._create_transfer, "POST"),
        ]
        for rule, endpoint, view, method in routes:
            self.app.add_url_rule(rule, endpoint, auth(_responds(view)), methods=[method])

    def start(self, address: str) -> None:
        """Serve HTTP on *address* (``host:port``) until interrupted."""
        host, port = _split_address(address)
        self.app.run(host=host, port=port, threaded=True)

    def _current_owner(self) -> Owner:
        payload = getattr(g, AUTHORIZATION_PAYLOAD_KEY)
        return _fetch(self.store.get_owner_by_email, payload.email)

    def _create_account(self) -> Any:
        data = _json_body()
        currency = _currency_field(data)
        country_code = _check("country_code", _json_int(data, "country_code", bits=32))

        owner = self._current_owner()
        try:
            account = self.store.create_account(owner.id, currency, 0, country_code)
        except sqlite3.IntegrityError as exc:
            raise _HTTPError(HTTPStatus.FORBIDDEN, exc) from exc
        except Exception as exc:
            raise _HTTPError(HTTPStatus.INTERNAL_SERVER_ERROR, exc) from exc
        return jsonify(to_json_dict(account))

    def _get_account(self, account_id: str) -> Any:
        account_id_value = _check("id", _text_int(account_id, "id"), minimum=1)

        account = _fetch(self.store.get_account, account_id_value)
        owner = self._current_owner()
        if account.owner_id != owner.id:
            raise _HTTPError(HTTPStatus.UNAUTHORIZED, "the account does not belong to the owner")
        return jsonify(to_json_dict(account))

    def _list_account(self) -> Any:
        page_id = _check(
            "page_id", _text_int(request.args.get("page_id"), "page_id", bits=32), minimum=1
        )
        page_size = _check(
            "page_size",
            _text_int(request.args.get("page_size"), "page_size", bits=32),
            minimum=5,
            maximum=10,
        )

        owner = self._current_owner()
        accounts = _fetch(self.store.list_account, owner.id, page_size, (page_id - 1) * page_size)
        return jsonify([to_json_dict(account) for account in accounts])

    def _account_with_currency(self, account_id: int, currency: Currency) -> Account:
        try:
            account = self.store.get_account(account_id)
        except Exception as exc:
            raise _HTTPError(HTTPStatus.NO_CONTENT, exc) from exc
        if account.currency != currency:
            raise _HTTPError(HTTPStatus.UNPROCESSABLE_ENTITY, "the currencies do not match")
        return account

    def _create_transfer(self) -> Any:
        data = _json_body()
        from_account_id = _check("from_account_id", _json_int(data, "from_account_id"), minimum=1)
        to_account_id = _check("to_account_id", _json_int(data, "to_account_id"), minimum=1)
        amount = _check("amount", _json_int(data, "amount"), minimum=1)
        currency = _currency_field(data)

        from_account = self._account_with_currency(from_account_id, currency)
        owner = self._current_owner()
        if from_account.owner_id != owner.id:
            raise _HTTPError(
                HTTPStatus.FORBIDDEN,
                "error: you can't transfer money from an account that is not yours",
            )

        self._account_with_currency(to_account_id, currency)

        if from_account.money <= amount:
            raise _HTTPError(
                HTTPStatus.UNPROCESSABLE_ENTITY, "not enough money to make the transfer"
            )

        try:
            result = self.store.transfer_tx(from_account_id, to_account_id, amount)
        except Exception as exc:
            raise _HTTPError(HTTPStatus.INTERNAL_SERVER_ERROR, exc) from exc
        return jsonify(to_json_dict(result))
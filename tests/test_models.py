import json
import uuid
from datetime import datetime, timezone

import pytest

from simplebank.models import (
    Account,
    Currency,
    Entry,
    NullCurrency,
    Session,
    Transfer,
    all_currency_values,
    scan_currency,
    to_json_dict,
)

CREATED = datetime(2024, 1, 2, 3, 4, 5, 120000, tzinfo=timezone.utc)


def test_scan_currency_from_text_and_bytes():
    assert scan_currency("USD") is Currency.USD
    assert scan_currency(b"EUR") is Currency.EUR
    assert scan_currency(Currency.JPY) is Currency.JPY


def test_scan_currency_unsupported_type():
    with pytest.raises(TypeError, match="unsupported scan type for Currency"):
        scan_currency(42)


def test_scan_currency_unknown_code():
    with pytest.raises(ValueError):
        scan_currency("GBP")


def test_all_currency_values_order():
    assert all_currency_values() == [Currency.USD, Currency.EUR, Currency.KRW, Currency.JPY]
    assert [str(c) for c in all_currency_values()] == ["USD", "EUR", "KRW", "JPY"]


def test_null_currency_scan_and_value():
    empty = NullCurrency.scan(None)
    assert empty.valid is False
    assert empty.value() is None and empty.currency is None
    present = NullCurrency.scan("KRW")
    assert present.valid is True
    assert present.value() == "KRW"


def test_null_currency_scan_error_propagates():
    with pytest.raises(TypeError):
        NullCurrency.scan(3.5)


def test_null_currency_json_keys():
    assert to_json_dict(NullCurrency.scan("USD")) == {"Currency": "USD", "valid": True}


def test_account_json():
    account = Account(
        id=7, owner_id=3, currency=Currency.EUR, created_at=CREATED, money=500, country_code=34
    )
    data = to_json_dict(account)
    assert data == {
        "id": 7,
        "owner_id": 3,
        "currency": "EUR",
        "created_at": "2024-01-02T03:04:05.12Z",
        "money": 500,
        "country_code": 34,
    }
    assert json.loads(json.dumps(data)) == data


def test_session_json_uuid_and_nested():
    session_id = uuid.uuid4()
    session = Session(
        id=session_id,
        owner_id=1,
        email="user@example.com",
        refresh_token="token",
        user_agent="agent",
        client_ip="127.0.0.1",
        is_blocked=False,
        created_at=CREATED,
        expires_at=CREATED,
    )
    data = to_json_dict(session)
    assert data["id"] == str(session_id)
    assert data["is_blocked"] is False

    entry = Entry(id=1, account_id=7, amount=-10, created_at=CREATED)
    transfer = Transfer(id=2, from_account_id=7, to_account_id=8, amount=10, created_at=CREATED)
    wrapped = to_json_dict(
        NullCurrency(currency=Currency.USD, valid=True)
    ) | {"entries": [_json for _json in map(to_json_dict, [entry])]}
    assert wrapped["entries"][0]["amount"] == -10
    assert to_json_dict(transfer)["created_at"] == to_json_dict(entry)["created_at"]


def test_records_are_immutable_values():
    first = Transfer(id=2, from_account_id=7, to_account_id=8, amount=10, created_at=CREATED)
    second = Transfer(id=2, from_account_id=7, to_account_id=8, amount=10, created_at=CREATED)
    assert first == second
    with pytest.raises(AttributeError):
        first.amount = 20


def test_to_json_dict_rejects_non_records():
    with pytest.raises(TypeError):
        to_json_dict({"id": 1})
    with pytest.raises(TypeError):
        to_json_dict(Account)
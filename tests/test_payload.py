import uuid
from datetime import datetime, timedelta, timezone

import pytest

from simplebank.payload import (
    ExpiredTokenError,
    InvalidTokenError,
    Payload,
    TokenError,
    new_payload,
)

EMAIL = "user@example.com"


def test_new_payload_fields():
    before = datetime.now(timezone.utc)
    payload = new_payload(EMAIL, timedelta(minutes=1))
    after = datetime.now(timezone.utc)
    assert payload.email == EMAIL
    assert payload.id.version == 1
    assert before <= payload.issued_at <= after
    assert payload.expired_at - payload.issued_at == timedelta(minutes=1)


def test_new_payload_ids_are_unique():
    ids = {new_payload(EMAIL, timedelta(minutes=1)).id for _ in range(20)}
    assert len(ids) == 20


def test_expired_payload_is_not_valid():
    payload = new_payload(EMAIL, timedelta(minutes=-1))
    with pytest.raises(ExpiredTokenError, match="token has expired"):
        payload.valid()


def test_fresh_payload_is_valid():
    payload = new_payload(EMAIL, timedelta(minutes=1))
    assert payload.valid() is None
    assert payload.expired_at > datetime.now(timezone.utc)


def test_dict_round_trip():
    payload = new_payload(EMAIL, timedelta(hours=2))
    data = payload.to_dict()
    assert set(data) == {"id", "email", "issued_at", "expired_at"}
    assert Payload.from_dict(data) == payload


def test_from_dict_accepts_z_suffix():
    payload = Payload.from_dict(
        {
            "id": str(uuid.uuid1()),
            "email": EMAIL,
            "issued_at": "2030-01-01T00:00:00Z",
            "expired_at": "2030-01-01T00:15:00Z",
        }
    )
    assert payload.expired_at.utcoffset() == timedelta(0)
    assert payload.expired_at - payload.issued_at == timedelta(minutes=15)


@pytest.mark.parametrize(
    "change",
    [
        {"id": "not-a-uuid"},
        {"email": 42},
        {"issued_at": "yesterday"},
        {"expired_at": None},
    ],
)
def test_from_dict_rejects_bad_values(change):
    data = new_payload(EMAIL, timedelta(minutes=1)).to_dict()
    data.update(change)
    with pytest.raises(InvalidTokenError, match="invalid token"):
        Payload.from_dict(data)


def test_from_dict_rejects_missing_key_and_non_mapping():
    data = new_payload(EMAIL, timedelta(minutes=1)).to_dict()
    del data["email"]
    with pytest.raises(InvalidTokenError):
        Payload.from_dict(data)
    with pytest.raises(InvalidTokenError):
        Payload.from_dict(["a", "list"])


def test_error_hierarchy():
    assert issubclass(ExpiredTokenError, TokenError)
    assert issubclass(InvalidTokenError, TokenError)
    assert str(InvalidTokenError()) == "invalid token"
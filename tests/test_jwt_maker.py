from datetime import timedelta

import jwt
import pytest

from simplebank.jwt_maker import JWTMaker
from simplebank.payload import ExpiredTokenError, InvalidTokenError, new_payload
from simplebank.random_utils import random_string

EMAIL = "user@example.com"
OTHER_ALGORITHM = "HS512"


def test_create_and_verify():
    maker = JWTMaker(random_string(32))
    signed, payload = maker.create_token(EMAIL, timedelta(minutes=1))
    assert signed.count(".") == 2
    verified = maker.verify_token(signed)
    assert verified == payload


def test_token_carries_payload_claims():
    maker = JWTMaker(random_string(32))
    signed, payload = maker.create_token(EMAIL, timedelta(minutes=1))
    claims = jwt.decode(signed, options={"verify_signature": False})
    assert claims == payload.to_dict()
    assert jwt.get_unverified_header(signed)["alg"] == "HS256"


def test_expired_token():
    maker = JWTMaker(random_string(32))
    signed, _ = maker.create_token(EMAIL, timedelta(minutes=-1))
    with pytest.raises(ExpiredTokenError):
        maker.verify_token(signed)


def test_wrong_key_is_invalid():
    signed, _ = JWTMaker(random_string(32)).create_token(EMAIL, timedelta(minutes=1))
    with pytest.raises(InvalidTokenError):
        JWTMaker(random_string(33)).verify_token(signed)


def test_tampered_signature_is_invalid():
    maker = JWTMaker(random_string(32))
    signed, _ = maker.create_token(EMAIL, timedelta(minutes=1))
    header, body, signature = signed.split(".")
    flipped = ("A" if signature[0] != "A" else "B") + signature[1:]
    with pytest.raises(InvalidTokenError):
        maker.verify_token(".".join([header, body, flipped]))


def test_garbage_is_invalid():
    maker = JWTMaker(random_string(32))
    with pytest.raises(InvalidTokenError):
        maker.verify_token("token")


def test_other_hmac_algorithms_are_accepted():
    secret_key = random_string(64)
    maker = JWTMaker(secret_key)
    payload = new_payload(EMAIL, timedelta(minutes=1))
    encoded = jwt.encode(payload.to_dict(), secret_key, algorithm=OTHER_ALGORITHM)
    assert maker.verify_token(encoded) == payload


def test_short_key_rejected():
    with pytest.raises(ValueError, match="must be at least 32 characters"):
        JWTMaker("secret")
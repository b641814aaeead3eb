"""Access tokens as HMAC-signed JSON Web Tokens."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from simplebank.maker import Maker
from simplebank.payload import ExpiredTokenError, InvalidTokenError, Payload, new_payload

MIN_KEY_SIZE = 32
_SIGNING_ALGORITHM = "HS256"
_HMAC_ALGORITHMS = ["HS256", "HS384", "HS512"]


class JWTMaker(Maker):
    """Signs tokens with HS256 and accepts any HMAC algorithm on verification."""

    def __init__(self, secret_key: str):
        if len(secret_key.encode("utf-8")) < MIN_KEY_SIZE:
            raise ValueError(f"invalid key size: must be at least {MIN_KEY_SIZE} characters")
        self._secret_key = secret_key

    def create_token(self, email: str, duration: timedelta) -> tuple[str, Payload]:
        payload = new_payload(email, duration)
        signed = jwt.encode(payload.to_dict(), self._secret_key, algorithm=_SIGNING_ALGORITHM)
        return signed, payload

    def verify_token(self, token: str) -> Payload:
        try:
            claims = jwt.decode(token, self._secret_key, algorithms=_HMAC_ALGORITHMS)
        except jwt.PyJWTError:
            raise InvalidTokenError() from None
        payload = Payload.from_dict(claims)

        # Claim times are compared at one-second precision.
        now = datetime.now(timezone.utc)
        if now >= payload.expired_at.replace(microsecond=0):
            raise ExpiredTokenError()
        if now < payload.issued_at.replace(microsecond=0):
            raise InvalidTokenError()
        return payload
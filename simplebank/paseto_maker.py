"""Access tokens as PASETO v2.local (XChaCha20-Poly1305) tokens."""

from __future__ import annotations

import base64
import binascii
import hashlib
import json
import os
import struct
from datetime import timedelta

from nacl.bindings import (
    crypto_aead_xchacha20poly1305_ietf_decrypt,
    crypto_aead_xchacha20poly1305_ietf_encrypt,
)
from nacl.exceptions import CryptoError

from simplebank.maker import Maker
from simplebank.payload import InvalidTokenError, Payload, new_payload

KEY_SIZE = 32
_HEADER = b"v2.local."
_NONCE_SIZE = 24
_TAG_SIZE = 16


def _pae(*pieces: bytes) -> bytes:
    def le64(n: int) -> bytes:
        return struct.pack("<Q", n & 0x7FFF_FFFF_FFFF_FFFF)

    return le64(len(pieces)) + b"".join(le64(len(piece)) + piece for piece in pieces)


def _b64encode(data: bytes) -> bytes:
    return base64.urlsafe_b64encode(data).rstrip(b"=")


def _b64decode(data: bytes) -> bytes:
    if b"=" in data:
        raise ValueError("unexpected padding")
    return base64.b64decode(data + b"=" * (-len(data) % 4), altchars=b"-_", validate=True)


def _encrypt(key: bytes, message: bytes, footer: bytes = b"") -> str:
    nonce = hashlib.blake2b(message, key=os.urandom(_NONCE_SIZE), digest_size=_NONCE_SIZE).digest()
    ciphertext = crypto_aead_xchacha20poly1305_ietf_encrypt(
        message, _pae(_HEADER, nonce, footer), nonce, key
    )
    token = _HEADER + _b64encode(nonce + ciphertext)
    if footer:
        token += b"." + _b64encode(footer)
    return token.decode("ascii")


def _decrypt(key: bytes, token: str) -> bytes:
    data = token.encode("ascii")
    if not data.startswith(_HEADER):
        raise ValueError("unsupported token header")
    body, sep, encoded_footer = data[len(_HEADER):].partition(b".")
    footer = _b64decode(encoded_footer) if sep else b""
    raw = _b64decode(body)
    if len(raw) < _NONCE_SIZE + _TAG_SIZE:
        raise ValueError("token too short")
    nonce, ciphertext = raw[:_NONCE_SIZE], raw[_NONCE_SIZE:]
    return crypto_aead_xchacha20poly1305_ietf_decrypt(
        ciphertext, _pae(_HEADER, nonce, footer), nonce, key
    )


class PasetoMaker(Maker):
    """Encrypts payloads with a 32-byte symmetric key."""

    def __init__(self, symmetric_key: str):
        key = symmetric_key.encode("utf-8")
        if len(key) != KEY_SIZE:
            raise ValueError(f"invalid key size! must be {KEY_SIZE} characters")
        self._symmetric_key = key

    def create_token(self, email: str, duration: timedelta) -> tuple[str, Payload]:
        payload = new_payload(email, duration)
        message = json.dumps(payload.to_dict(), separators=(",", ":")).encode("utf-8")
        return _encrypt(self._symmetric_key, message), payload

    def verify_token(self, token: str) -> Payload:
        try:
            plain = _decrypt(self._symmetric_key, token)
            payload = Payload.from_dict(json.loads(plain))
        except (CryptoError, ValueError, TypeError, binascii.Error):
            raise InvalidTokenError() from None
        payload.valid()
        return payload
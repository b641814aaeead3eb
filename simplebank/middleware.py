"""Bearer-token authentication for the HTTP API."""

from __future__ import annotations

import functools
from typing import Any, Callable

from flask import g, jsonify, request

from simplebank.maker import Maker
from simplebank.payload import Payload, TokenError

AUTHORIZATION_HEADER = "Authorization"
AUTH_TYPE_BEARER = "bearer"
AUTHORIZATION_PAYLOAD_KEY = "authorization_payload"


class AuthError(Exception):
    """The request does not carry a valid bearer token."""


def authenticate(token_maker: Maker, authorization_header: str | None) -> Payload:
    """Return the payload of the bearer token in *authorization_header*."""
    if not authorization_header:
        raise AuthError("authorization header is required")

    fields = authorization_header.split()
    if len(fields) < 2:
        raise AuthError("invalid authorization header format")

    if fields[0].lower() != AUTH_TYPE_BEARER:
        raise AuthError("invalid authorization header type")

    try:
        return token_maker.verify_token(fields[1])
    except TokenError as exc:
        raise AuthError(str(exc)) from exc


def auth_required(token_maker: Maker) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate a view so it answers 401 unless the request is authenticated.

    The verified payload is stored on ``flask.g`` as ``authorization_payload``.
    """

    def decorator(view: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(view)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                payload = authenticate(token_maker, request.headers.get(AUTHORIZATION_HEADER))
            except AuthError as exc:
                return jsonify({"error": str(exc)}), 401
            setattr(g, AUTHORIZATION_PAYLOAD_KEY, payload)
            return view(*args, **kwargs)

        return wrapper

    return decorator
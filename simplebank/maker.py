"""Interface shared by the token makers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta

from simplebank.payload import Payload


class Maker(ABC):
    """Creates and verifies access tokens."""

    @abstractmethod
    def create_token(self, email: str, duration: timedelta) -> tuple[str, Payload]:
        """Return a new token for *email* valid for *duration*, with its payload."""

    @abstractmethod
    def verify_token(self, token: str) -> Payload:
        """Return the payload of a valid token, or raise a token error."""
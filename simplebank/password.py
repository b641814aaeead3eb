"""Password hashing with bcrypt."""

import bcrypt

DEFAULT_COST = 10
_MAX_PASSWORD_BYTES = 72


class PasswordMismatchError(ValueError):
    """The password does not match the stored hash."""

    def __init__(self, message: str = "hashedPassword is not the hash of the given password"):
        super().__init__(message)


def hash_password(password: str) -> str:
    """Return the bcrypt hash of *password*."""
    encoded = password.encode("utf-8")
    if len(encoded) > _MAX_PASSWORD_BYTES:
        raise ValueError("failed to hash password: password length exceeds 72 bytes")
    salt = bcrypt.gensalt(rounds=DEFAULT_COST, prefix=b"2a")
    return bcrypt.hashpw(encoded, salt).decode("ascii")


def check_password(password: str, hashed_password: str) -> None:
    """Raise :class:`PasswordMismatchError` unless *password* matches *hashed_password*."""
    if not bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8")):
        raise PasswordMismatchError()
"""Random values for sample data."""

import random
import string

ALPHABET = string.ascii_lowercase
CURRENCIES = ("EUR", "USD", "KRW", "JPY")


def random_int(low: int, high: int) -> int:
    """Return a random integer between *low* and *high*, both included."""
    return random.randint(low, high)


def random_string(n: int) -> str:
    """Return *n* random lowercase letters."""
    return "".join(random.choices(ALPHABET, k=n))


def random_email() -> str:
    """Return a random e-mail address."""
    return random_string(random_int(5, 8)) + "@example.com"


def random_owner() -> int:
    """Return an owner identifier."""
    return 1


def random_money() -> int:
    """Return an amount between 0 and 1000."""
    return random_int(0, 1000)


def random_currency() -> str:
    """Return one of EUR, USD, KRW or JPY."""
    return random.choice(CURRENCIES)
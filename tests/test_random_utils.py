import pytest

from simplebank.random_utils import (
    ALPHABET,
    random_currency,
    random_email,
    random_int,
    random_money,
    random_owner,
    random_string,
)


def test_random_int_in_range():
    values = [random_int(5, 8) for _ in range(200)]
    assert all(5 <= value <= 8 for value in values)
    assert random_int(3, 3) == 3


def test_random_int_empty_range_raises():
    with pytest.raises(ValueError):
        random_int(5, 3)


@pytest.mark.parametrize("n", [0, 1, 7, 32])
def test_random_string_length_and_alphabet(n):
    text = random_string(n)
    assert len(text) == n
    assert set(text) <= set(ALPHABET)


def test_random_email_shape():
    for _ in range(50):
        local, _, domain = random_email().partition("@")
        assert domain == "example.com"
        assert 5 <= len(local) <= 8
        assert set(local) <= set(ALPHABET)


def test_random_owner_is_one():
    assert random_owner() == 1


def test_random_money_range():
    assert all(0 <= random_money() <= 1000 for _ in range(200))


def test_random_currency_choices():
    seen = {random_currency() for _ in range(300)}
    assert seen <= {"EUR", "USD", "KRW", "JPY"}
    assert len(seen) > 1
"""Tests for money helpers and the generation guard"""
from decimal import Decimal

import pytest

from krisha.generation import Generation
from krisha.money import format_money, parse_money, round_money, to_decimal


def test_to_decimal_is_lenient():
    assert to_decimal(None) == Decimal("0")
    assert to_decimal("abc") == Decimal("0")
    assert to_decimal(0.1) == Decimal("0.1")


@pytest.mark.parametrize("value", ["abc", "-0.01", "NaN", "Infinity", True, None])
def test_parse_money_rejects(value):
    with pytest.raises(ValueError):
        parse_money(value)


def test_parse_money_accepts_numbers_and_strings():
    assert parse_money("1200.50") == Decimal("1200.50")
    assert parse_money(12) == Decimal("12")
    assert parse_money(0.3) == Decimal("0.3")


def test_round_and_format():
    assert round_money("2.345") == Decimal("2.35")
    assert format_money(Decimal("125000")) == "NPR 125,000.00"
    assert format_money("9.5", currency="USD") == "USD 9.50"


def test_generation_invalidates_old_stamps():
    generation = Generation()
    first = generation.current()

    second = generation.advance()

    assert not generation.is_current(first)
    assert generation.is_current(second)

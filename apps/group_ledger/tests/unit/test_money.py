from decimal import Decimal

import pytest

from group_ledger.domain.money import (
    format_cents,
    format_money,
    from_cents,
    parse_money,
    quantize_money,
    split_evenly,
    to_cents,
)


def test_quantize_money_uses_round_half_up() -> None:
    assert quantize_money(Decimal("10.005")) == Decimal("10.01")
    assert quantize_money(Decimal("10.004")) == Decimal("10.00")


def test_parse_money_returns_quantized_decimal() -> None:
    assert parse_money("2.675") == Decimal("2.68")


def test_format_money_has_two_decimal_places() -> None:
    assert format_money(Decimal("5")) == "5.00"


def test_cents_conversion_rounds_half_up() -> None:
    assert to_cents(Decimal("12.345")) == 1235
    assert from_cents(1235) == Decimal("12.35")
    assert format_cents(-5000) == "-50.00"


def test_split_evenly_gives_leftover_cents_to_leading_parts() -> None:
    assert split_evenly(100, 3) == [34, 33, 33]
    assert split_evenly(0, 2) == [0, 0]
    assert sum(split_evenly(100001, 7)) == 100001


def test_split_evenly_rejects_zero_parts() -> None:
    with pytest.raises(ValueError):
        split_evenly(100, 0)

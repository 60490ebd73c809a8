from decimal import Decimal

import pytest

from services.errors import DivisionError
from utils.pricing import line_total, money, shares_balance, split_share, to_decimal, with_vat


def test_line_total_multiplies_unit_price():
    assert line_total(Decimal("12.50"), 3) == Decimal("37.50")


def test_float_input_does_not_leak_binary_noise():
    assert to_decimal(0.1) == Decimal("0.1")
    assert line_total(0.1, 3) == Decimal("0.3")


def test_split_share_keeps_full_precision():
    share = split_share(Decimal("100"), 3)
    assert share != money(share)
    assert money(share) == Decimal("33.33")
    assert shares_balance(share, 3, Decimal("100"))


@pytest.mark.parametrize("count", [0, -2, None])
def test_split_share_rejects_non_positive_count(count):
    with pytest.raises(DivisionError):
        split_share(Decimal("100"), count)


def test_division_error_is_a_zero_division_error():
    with pytest.raises(ZeroDivisionError):
        split_share(Decimal("10"), 0)


def test_with_vat():
    assert with_vat(Decimal("200"), Decimal("0.14")) == Decimal("228.00")
    assert with_vat(Decimal("200"), 0) == Decimal("200")


def test_money_rounds_half_up():
    assert money(Decimal("0.005")) == Decimal("0.01")
    assert money(Decimal("2.344")) == Decimal("2.34")


def test_shares_balance_tolerance():
    assert shares_balance(Decimal("33.33"), 3, Decimal("100"))
    assert not shares_balance(Decimal("33.00"), 3, Decimal("100"))

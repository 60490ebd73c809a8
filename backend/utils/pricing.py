# backend/utils/pricing.py
"""Currency arithmetic for cart lines, split shares and bills.

Everything is ``Decimal`` and kept at full precision. ``money()`` rounds to
cents and is only applied when a value leaves the core (responses, stored
payment amounts), so repeated recomputation never compounds rounding error.
"""
from decimal import Decimal, ROUND_HALF_UP

from services.errors import DivisionError

CENT = Decimal("0.01")
# Allowed drift between split_price * split_count and original_price
TOLERANCE = CENT


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        return Decimal("0")
    # str() first so floats like 0.1 do not drag binary noise in
    return Decimal(str(value))


def money(amount) -> Decimal:
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(unit_price, quantity: int) -> Decimal:
    return to_decimal(unit_price) * quantity


def split_share(original_price, split_count: int) -> Decimal:
    if split_count is None or split_count <= 0:
        raise DivisionError(f"Cannot split a price {split_count} ways")
    return to_decimal(original_price) / split_count


def with_vat(amount, vat_rate) -> Decimal:
    return to_decimal(amount) * (1 + to_decimal(vat_rate))


def shares_balance(split_price, split_count: int, original_price) -> bool:
    drift = to_decimal(split_price) * split_count - to_decimal(original_price)
    return abs(drift) <= TOLERANCE

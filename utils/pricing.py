from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps 199.995 as 199.995 instead of the binary float expansion
    return Decimal(str(value))


def round_money(amount) -> Decimal:
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(unit_price, quantity: int) -> Decimal:
    return round_money(to_decimal(unit_price) * quantity)


def order_total(lines: Iterable[Tuple[object, int]]) -> Decimal:
    """
    Sum of (unit price x quantity) over (unit_price, quantity) pairs.

    Every line is rounded half-up to two decimals before it is added, so
    199.995 + 50.00 totals 250.00.
    """
    total = sum((line_total(price, qty) for price, qty in lines), Decimal("0.00"))
    return round_money(total)


def to_minor_units(amount) -> int:
    """Gateway amounts are integers in the currency's smallest unit (paise, cents)."""
    return int((to_decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

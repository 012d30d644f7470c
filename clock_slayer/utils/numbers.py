"""Decimal helpers for rates, hours and miles."""
from decimal import ROUND_HALF_UP, Decimal

from bson import Decimal128

TWO_PLACES = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """
    Coerce a stored or submitted quantity to Decimal.

    Accepts BSON Decimal128 (what Mongo hands back), Decimal, int, float and
    numeric strings. None is zero.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal128):
        return value.to_decimal()
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_decimal128(value) -> Decimal128:
    """Convert a quantity to Decimal128 for storage."""
    return Decimal128(to_decimal(value))


def round_2(value) -> Decimal:
    """Round half-up to two decimal places."""
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def format_2(value) -> str:
    """Render a quantity as a fixed two-decimal string, e.g. ``"12.50"``."""
    return format(round_2(value), "f")

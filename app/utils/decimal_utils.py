# app/utils/decimal_utils.py
from decimal import Decimal, ROUND_HALF_UP

TWOPLACES = Decimal("0.01")


def to_decimal(value, default: Decimal | None = Decimal("0.00")) -> Decimal | None:
    """Quantize to two places (half-up); floats go through str to avoid binary noise."""
    if value is None:
        return default
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(TWOPLACES, rounding=ROUND_HALF_UP)

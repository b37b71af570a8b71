"""
Money helpers.

All amounts are Decimal. Rounding is always to minor currency units
with ROUND_HALF_UP, so a figure drifts at most half a cent from its
exact value.
"""

from decimal import ROUND_HALF_UP, Decimal

from splitsave.engine.errors import ValidationError


MINOR_UNIT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value, field: str = "amount") -> Decimal:
    """Coerce an int/str/Decimal to Decimal. Floats go through str()."""
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ValidationError(f"{field} must be a number, got a boolean", field=field)
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value)
        except ArithmeticError:
            raise ValidationError(f"{field} is not a valid number: {value!r}", field=field)
    elif isinstance(value, float):
        result = Decimal(str(value))
    else:
        raise ValidationError(
            f"{field} must be a number, got {type(value).__name__}", field=field
        )

    if not result.is_finite():
        raise ValidationError(f"{field} must be finite", field=field)
    return result


def round_money(value: Decimal) -> Decimal:
    """Round to minor currency units."""
    return value.quantize(MINOR_UNIT, rounding=ROUND_HALF_UP)


def require_non_negative(value, field: str) -> Decimal:
    amount = to_decimal(value, field)
    if amount < 0:
        raise ValidationError(f"{field} cannot be negative (got {amount})", field=field)
    return amount


def percentage(part: Decimal, whole: Decimal) -> Decimal:
    """part / whole x 100 rounded to 0.01; 0 when whole is 0."""
    if whole == 0:
        return ZERO.quantize(MINOR_UNIT)
    return round_money(part / whole * HUNDRED)

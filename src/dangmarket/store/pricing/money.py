"""Money helpers shared by the pricing calculators.

Amounts are plain ``Decimal`` values in Nepali Rupees unless stated
otherwise. NPR totals are whole rupees; display currencies keep two places.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN

NPR = "NPR"
USD = "USD"
INR = "INR"

ZERO = Decimal("0")


def round_money(amount: Decimal, places: int = 2) -> Decimal:
    """Round to specified decimal places using banker's rounding."""
    return amount.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_EVEN)


def round_npr(amount: Decimal) -> Decimal:
    """Round to whole rupees."""
    return round_money(amount, 0)


def to_decimal(value) -> Decimal:
    """Coerce int/float/str input to a finite Decimal.

    Floats go through ``str`` so 0.1 stays 0.1.

    Raises:
        InvalidOperation: value is not a finite number
    """
    if isinstance(value, bool):
        raise InvalidOperation(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as e:
            raise InvalidOperation(f"Not a number: {value!r}") from e
    if not result.is_finite():
        raise InvalidOperation(f"Not a finite number: {value!r}")
    return result

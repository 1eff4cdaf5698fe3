"""Weight and volume unit conversion.

Customers may enter a quantity in a different unit than the one the product
is priced in (500 gram of a per-kg product, a half liter of a per-liter
product). Everything is converted through a base unit per family: grams for
weight, millilitres for volume.
"""

from decimal import Decimal, InvalidOperation
from enum import Enum

from .exceptions import IncompatibleUnitError, InvalidQuantityError
from .money import to_decimal


class Unit(str, Enum):
    KG = "kg"
    GRAM = "gram"
    LITER = "liter"
    ML = "ml"
    HALF_LITER = "half-liter"

    @classmethod
    def parse(cls, value) -> "Unit | None":
        """Resolve a unit name or alias; None for units outside the table."""
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        return _ALIASES.get(str(value).strip().lower())


_ALIASES = {
    "kg": Unit.KG,
    "kgs": Unit.KG,
    "kilogram": Unit.KG,
    "gram": Unit.GRAM,
    "grams": Unit.GRAM,
    "g": Unit.GRAM,
    "liter": Unit.LITER,
    "litre": Unit.LITER,
    "liters": Unit.LITER,
    "l": Unit.LITER,
    "ml": Unit.ML,
    "half-liter": Unit.HALF_LITER,
    "half_liter": Unit.HALF_LITER,
    "halfliter": Unit.HALF_LITER,
}

WEIGHT = "weight"
VOLUME = "volume"

# unit -> (family, size in the family's base unit)
_FACTORS = {
    Unit.KG: (WEIGHT, Decimal("1000")),
    Unit.GRAM: (WEIGHT, Decimal("1")),
    Unit.LITER: (VOLUME, Decimal("1000")),
    Unit.ML: (VOLUME, Decimal("1")),
    Unit.HALF_LITER: (VOLUME, Decimal("500")),
}


def unit_family(unit) -> str | None:
    parsed = Unit.parse(unit)
    if parsed is None:
        return None
    return _FACTORS[parsed][0]


def _validate_quantity(quantity) -> Decimal:
    try:
        value = to_decimal(quantity)
    except InvalidOperation as e:
        raise InvalidQuantityError(quantity) from e
    if value <= 0:
        raise InvalidQuantityError(quantity)
    return value


def convert(quantity, from_unit, to_unit) -> Decimal:
    """Convert a quantity between two units of the same family.

    Args:
        quantity: Positive amount in ``from_unit``
        from_unit: Unit (or unit name) the quantity was entered in
        to_unit: Unit (or unit name) to express it in

    Returns:
        The quantity expressed in ``to_unit``

    Raises:
        InvalidQuantityError: quantity is not a positive number
        IncompatibleUnitError: units are unknown or from different families
    """
    value = _validate_quantity(quantity)

    source = Unit.parse(from_unit)
    target = Unit.parse(to_unit)
    if source is None or target is None:
        raise IncompatibleUnitError(from_unit, to_unit)
    if source is target:
        return value

    source_family, source_size = _FACTORS[source]
    target_family, target_size = _FACTORS[target]
    if source_family != target_family:
        raise IncompatibleUnitError(source.value, target.value)

    return value * source_size / target_size


def normalize_quantity(quantity, entered_unit, product_unit) -> Decimal:
    """Express a customer-entered quantity in the product's pricing unit.

    Count-based products ("pc", "dozen", ...) are not in the conversion
    table; they pass through unchanged as long as the customer used the
    same unit.
    """
    if str(entered_unit).strip().lower() == str(product_unit).strip().lower():
        return _validate_quantity(quantity)
    return convert(quantity, entered_unit, product_unit)

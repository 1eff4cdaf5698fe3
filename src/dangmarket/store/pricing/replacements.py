"""Price comparison for customer-selected replacement products.

The comparison is advisory: an admin confirms availability before the
substitution is applied, and approval is recorded as its own event. Order
totals are never changed here.
"""

from decimal import Decimal
from typing import NamedTuple

from .types import CartLine, ReplacementClassification, ReplacementMapping


class ReplacementComparison(NamedTuple):
    """Result of comparing a replacement against the original line."""

    delta: Decimal
    classification: ReplacementClassification
    line_delta: Decimal


def classify(delta: Decimal) -> ReplacementClassification:
    if delta > 0:
        return ReplacementClassification.HIGHER
    if delta < 0:
        return ReplacementClassification.LOWER
    return ReplacementClassification.EQUAL


def compare(original: CartLine, replacement: CartLine) -> ReplacementComparison:
    """Compare unit prices of the original and the substitute.

    ``delta`` is per unit, as shown to the customer when picking the
    substitute. ``line_delta`` scales it by the original quantity for
    admins estimating the effect on the order.
    """
    delta = replacement.unit_price - original.unit_price
    return ReplacementComparison(
        delta=delta,
        classification=classify(delta),
        line_delta=delta * original.quantity,
    )


def build_replacement_mapping(original: CartLine, replacement: CartLine) -> ReplacementMapping:
    comparison = compare(original, replacement)
    return ReplacementMapping(
        original_line_id=original.line_id,
        replacement_line=replacement,
        price_delta=comparison.delta,
        classification=comparison.classification,
    )

"""Business account discount."""

from decimal import Decimal
from typing import NamedTuple

from .money import ZERO, round_npr, to_decimal

BUSINESS_DISCOUNT_RATE = Decimal("0.10")


class DiscountResult(NamedTuple):
    discount: Decimal
    net_subtotal: Decimal


def apply_business_discount(
    subtotal,
    is_business_account: bool,
    rate: Decimal = BUSINESS_DISCOUNT_RATE,
) -> DiscountResult:
    """Flat-rate discount for business accounts.

    The discount is rounded to whole rupees and always lies within
    ``[0, subtotal]``, so the net subtotal is never negative.
    """
    amount = to_decimal(subtotal)
    if not is_business_account or amount <= 0:
        return DiscountResult(discount=ZERO, net_subtotal=max(amount, ZERO))

    discount = round_npr(amount * to_decimal(rate))
    discount = min(max(discount, ZERO), amount)
    return DiscountResult(discount=discount, net_subtotal=amount - discount)

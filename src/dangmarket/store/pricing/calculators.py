"""Order total calculation for checkout.

``compute_order`` turns a CheckoutDraft plus reference data (shops,
delivery settings, exchange rates) into the OrderTotals that are written to
the order record. The steps run in a fixed order:

1. subtotal = shopping list estimate + cart lines
2. business discount on the subtotal
3. delivery fee, checked against the *pre-discount* subtotal
4. grand total = discounted subtotal + delivery fee
5. USD mirror for internationally settled payment methods
6. credit headroom check and due date for credit payments

The computation is pure: same inputs, same totals. The only clock read is
the credit due date, and callers can pin it with ``now``.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, NamedTuple, Sequence

from django.utils import timezone

from .credit import check_credit, due_date
from .currency import CurrencyConverter
from .delivery import (
    LEGACY_DELIVERY_FEE,
    LEGACY_FREE_DELIVERY_THRESHOLD,
    DeliveryMethod,
    DeliveryRule,
    compute_delivery_fee,
)
from .discounts import BUSINESS_DISCOUNT_RATE, apply_business_discount
from .exceptions import EmptyOrderError, PricingError
from .money import NPR, ZERO, round_npr
from .types import CheckoutDraft, DeliverySettings, PaymentMethod, ShopLocation

logger = logging.getLogger(__name__)


class PricingPolicy(NamedTuple):
    """Store-wide pricing knobs, normally read from settings."""

    business_discount_rate: Decimal = BUSINESS_DISCOUNT_RATE
    legacy_free_delivery_threshold: Decimal = LEGACY_FREE_DELIVERY_THRESHOLD
    legacy_delivery_fee: Decimal = LEGACY_DELIVERY_FEE


DEFAULT_POLICY = PricingPolicy()


class OrderTotals(NamedTuple):
    """Authoritative totals for one order. Written once, never recomputed."""

    shopping_list_subtotal: Decimal
    cart_subtotal: Decimal
    subtotal: Decimal
    business_discount: Decimal
    delivery_fee: Decimal
    grand_total: Decimal
    payment_method: PaymentMethod
    delivery_method: DeliveryMethod
    delivery_rule: DeliveryRule
    grand_total_usd: Decimal | None = None
    nearest_shop_id: Any = None
    nearest_distance_km: Decimal | None = None
    credit_due_date: datetime | None = None
    currency: str = NPR

    def as_record(self) -> dict:
        """Field values for the persisted order record."""
        return {
            "shopping_list_total": self.shopping_list_subtotal,
            "subtotal": self.subtotal,
            "business_discount": self.business_discount,
            "delivery_fee": self.delivery_fee,
            "total_amount": self.grand_total,
            "total_amount_usd": self.grand_total_usd,
            "nearest_distance_km": self.nearest_distance_km,
            "delivery_rule": self.delivery_rule.value,
        }


class CheckoutResult(NamedTuple):
    """Either totals or the reason they could not be computed."""

    totals: OrderTotals | None = None
    error: PricingError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _validate_contents(draft: CheckoutDraft) -> None:
    shopping_list = draft.shopping_list
    if shopping_list is not None and shopping_list.estimated_total is None:
        raise EmptyOrderError("Shopping list total is missing")
    if not draft.cart_lines and draft.shopping_list_subtotal <= 0:
        raise EmptyOrderError()


def compute_order(
    draft: CheckoutDraft,
    *,
    shops: Sequence[ShopLocation] = (),
    delivery_settings: DeliverySettings | None = None,
    converter: CurrencyConverter | None = None,
    policy: PricingPolicy = DEFAULT_POLICY,
    now: datetime | None = None,
) -> OrderTotals:
    """Calculate the totals for a checkout.

    Args:
        draft: The customer's checkout choices
        shops: Shop locations in a stable order (first wins distance ties)
        delivery_settings: Active delivery settings, None for the flat rule
        converter: Exchange rates for the USD mirror (default rates if None)
        policy: Discount rate and flat delivery rule
        now: Reference time for credit due dates (default: now)

    Returns:
        OrderTotals

    Raises:
        UnknownPaymentMethodError: payment method not supported
        UnknownDeliveryMethodError: delivery method not supported
        EmptyOrderError: nothing to charge for
        InsufficientCreditError: credit payment exceeds remaining credit
    """
    payment_method = PaymentMethod.parse(draft.payment_method)
    delivery_method = DeliveryMethod.parse(draft.delivery_method)
    _validate_contents(draft)

    account = draft.effective_account
    converter = converter or CurrencyConverter()

    # 1. Subtotal
    shopping_list_subtotal = round_npr(draft.shopping_list_subtotal)
    subtotal = round_npr(shopping_list_subtotal + draft.cart_subtotal)
    cart_subtotal = subtotal - shopping_list_subtotal

    # 2. Business discount
    discount = apply_business_discount(
        subtotal,
        account.is_business_account,
        rate=policy.business_discount_rate,
    )

    # 3. Delivery fee (threshold uses the pre-discount subtotal)
    delivery = compute_delivery_fee(
        destination=draft.destination,
        shops=shops,
        settings=delivery_settings,
        order_subtotal=subtotal,
        delivery_method=delivery_method,
        is_business_account=account.is_business_account,
        legacy_threshold=policy.legacy_free_delivery_threshold,
        legacy_fee=policy.legacy_delivery_fee,
    )

    # 4. Grand total
    grand_total = max(discount.net_subtotal + delivery.fee, ZERO)

    # 5. USD mirror
    grand_total_usd = None
    if payment_method.is_international:
        grand_total_usd = converter.to_usd(grand_total)

    # 6. Credit
    credit_due_date = None
    if payment_method is PaymentMethod.CREDIT:
        check_credit(account, grand_total)
        credit_due_date = due_date(account.credit_payment_terms, now or timezone.now())

    totals = OrderTotals(
        shopping_list_subtotal=shopping_list_subtotal,
        cart_subtotal=cart_subtotal,
        subtotal=subtotal,
        business_discount=discount.discount,
        delivery_fee=delivery.fee,
        grand_total=grand_total,
        payment_method=payment_method,
        delivery_method=delivery_method,
        delivery_rule=delivery.rule,
        grand_total_usd=grand_total_usd,
        nearest_shop_id=delivery.nearest_shop.id if delivery.nearest_shop else None,
        nearest_distance_km=delivery.distance_km,
        credit_due_date=credit_due_date,
    )
    logger.debug(
        "Computed order totals: subtotal=%s discount=%s fee=%s (%s) total=%s",
        totals.subtotal,
        totals.business_discount,
        totals.delivery_fee,
        totals.delivery_rule.value,
        totals.grand_total,
    )
    return totals


def quote_order(draft: CheckoutDraft, **kwargs) -> CheckoutResult:
    """Like compute_order, but report pricing failures as a result value.

    Accepts the same keyword arguments as compute_order.
    """
    try:
        return CheckoutResult(totals=compute_order(draft, **kwargs))
    except PricingError as e:
        logger.info("Checkout rejected (%s): %s", e.code, e.message)
        return CheckoutResult(error=e)

"""Checkout services.

Glue between the pricing engine and the database: reference data is read
through the repositories before pricing, and the order is written once,
inside a single transaction, after pricing succeeded.
"""

import logging
import uuid
from datetime import datetime

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from .conf import get_currency_converter, get_pricing_policy
from .models import CreditOrder, Order, ReplacementEvent, ShoppingList
from .pricing.calculators import CheckoutResult, OrderTotals, compute_order
from .pricing.exceptions import PricingError, ShoppingListNotPayableError
from .pricing.money import round_money, to_decimal
from .pricing.types import GUEST_ACCOUNT, CheckoutDraft, PaymentMethod
from .repositories import (
    DeliverySettingsRepository,
    DjangoDeliverySettingsRepository,
    DjangoShopLocationRepository,
    ShopLocationRepository,
)

logger = logging.getLogger(__name__)

CART_ORDER_PREFIX = "DNG"
SHOPPING_LIST_ORDER_PREFIX = "SL"


def generate_order_number(prefix: str = CART_ORDER_PREFIX) -> str:
    """``PREFIX-YYYYMMDD-XXXXXX`` with a random hex suffix."""
    today = timezone.localdate()
    return f"{prefix}-{today:%Y%m%d}-{uuid.uuid4().hex[:6].upper()}"


def _pricing_context(
    shop_repository: ShopLocationRepository | None,
    settings_repository: DeliverySettingsRepository | None,
) -> dict:
    shop_repository = shop_repository or DjangoShopLocationRepository()
    settings_repository = settings_repository or DjangoDeliverySettingsRepository()
    return {
        "shops": shop_repository.list(),
        "delivery_settings": settings_repository.get_active_settings(),
        "converter": get_currency_converter(),
        "policy": get_pricing_policy(),
    }


def _compute(draft, shop_repository, settings_repository, now) -> OrderTotals:
    context = _pricing_context(shop_repository, settings_repository)
    return compute_order(draft, now=now, **context)


def quote_checkout(
    draft: CheckoutDraft,
    *,
    shop_repository: ShopLocationRepository | None = None,
    settings_repository: DeliverySettingsRepository | None = None,
    now: datetime | None = None,
) -> CheckoutResult:
    """Price a checkout for display without persisting anything.

    Invalid stored configuration is reported the same way as an invalid
    draft: as ``CheckoutResult.error``.
    """
    try:
        totals = _compute(draft, shop_repository, settings_repository, now)
    except PricingError as e:
        logger.info("Checkout quote rejected (%s): %s", e.code, e.message)
        return CheckoutResult(error=e)
    return CheckoutResult(totals=totals)


def _payment_status(payment_method: PaymentMethod) -> str:
    if payment_method.is_online:
        return Order.PaymentStatus.PROCESSING
    return Order.PaymentStatus.PENDING


@transaction.atomic
def place_order(
    draft: CheckoutDraft,
    *,
    customer=None,
    shopping_list: ShoppingList | None = None,
    shop_repository: ShopLocationRepository | None = None,
    settings_repository: DeliverySettingsRepository | None = None,
    now: datetime | None = None,
) -> Order:
    """Price the draft and persist the order.

    The account profile always comes from ``customer`` (guest checkout when
    None), never from the draft, and a shopping list is priced from its
    stored estimate. Shops must be persisted ShopLocation rows.

    Args:
        draft: The customer's checkout choices
        customer: Ordering user, or None for guest checkout
        shopping_list: Admin-priced shopping list paid by this order
        shop_repository: Shop source (default: database)
        settings_repository: Delivery settings source (default: database)
        now: Reference time for credit due dates

    Returns:
        The created Order

    Raises:
        PricingError: the order could not be priced; nothing is written
        ShoppingListNotPayableError: the list is not awaiting payment
        ValueError: the draft carries a shopping list but no row was given
    """
    if shopping_list is None and draft.shopping_list is not None:
        raise ValueError("Pass the ShoppingList row as shopping_list= to pay for a list")

    if customer is not None:
        # Lock the row so concurrent credit orders see each other's balance.
        customer = get_user_model().objects.select_for_update().get(pk=customer.pk)
        account = customer.get_account_profile()
    else:
        account = GUEST_ACCOUNT

    changes = {"account": account}
    if shopping_list is not None:
        # Re-read under lock so a list is paid at most once.
        shopping_list = ShoppingList.objects.select_for_update().get(pk=shopping_list.pk)
        if shopping_list.status != ShoppingList.Status.PRICED:
            raise ShoppingListNotPayableError(shopping_list.pk, shopping_list.status)
        changes["shopping_list"] = shopping_list.to_value()
    draft = draft.with_changes(**changes)

    totals = _compute(draft, shop_repository, settings_repository, now)

    lines = list(draft.cart_lines)
    if draft.shopping_list is not None:
        lines = [*draft.shopping_list.list_items, *lines]

    destination = draft.destination
    prefix = SHOPPING_LIST_ORDER_PREFIX if shopping_list is not None else CART_ORDER_PREFIX
    order = Order.objects.create(
        order_number=generate_order_number(prefix),
        customer=customer,
        items=[line.as_record() for line in lines],
        delivery_method=totals.delivery_method.value,
        payment_method=totals.payment_method.value,
        payment_status=_payment_status(totals.payment_method),
        is_international_order=draft.is_international,
        is_gift=draft.is_gift,
        latitude=round_money(to_decimal(destination.latitude), 6) if destination else None,
        longitude=round_money(to_decimal(destination.longitude), 6) if destination else None,
        nearest_shop_id=totals.nearest_shop_id,
        replacement_mappings=[m.as_record() for m in draft.replacements] or None,
        has_replacements=bool(draft.replacements),
        **totals.as_record(),
    )

    if totals.payment_method is PaymentMethod.CREDIT:
        CreditOrder.objects.create(
            customer=customer,
            order=order,
            amount=totals.grand_total,
            due_date=timezone.localdate(totals.credit_due_date) if totals.credit_due_date else None,
        )
        get_user_model().objects.filter(pk=customer.pk).update(
            current_credit_balance=F("current_credit_balance") + totals.grand_total
        )
        logger.info(
            "Charged %s to credit of %s (due %s)",
            totals.grand_total,
            customer.email,
            totals.credit_due_date,
        )

    if shopping_list is not None:
        shopping_list.status = ShoppingList.Status.PAID
        shopping_list.order = order
        shopping_list.delivery_method = totals.delivery_method.value
        shopping_list.save(update_fields=["status", "order", "delivery_method", "updated_at"])

    logger.info(
        "Placed order %s: total=%s fee=%s rule=%s payment=%s",
        order.order_number,
        totals.grand_total,
        totals.delivery_fee,
        totals.delivery_rule.value,
        totals.payment_method.value,
    )
    return order


def record_replacement_decision(
    order: Order,
    original_line_id,
    approved: bool,
    decided_by=None,
) -> ReplacementEvent:
    """Record an admin's decision on a customer-chosen replacement.

    The order's totals are left as they are.

    Raises:
        ValueError: the order has no replacement for ``original_line_id``
    """
    for mapping in order.replacement_mappings or []:
        if str(mapping["original_line_id"]) == str(original_line_id):
            break
    else:
        raise ValueError(
            f"Order {order.order_number} has no replacement for line {original_line_id!r}"
        )

    replacement = mapping["replacement"]
    event = ReplacementEvent.objects.create(
        order=order,
        original_product_id=str(original_line_id),
        replacement_product_id=str(replacement["product_id"]),
        replacement_product_name=replacement.get("product_name", ""),
        price_delta=to_decimal(mapping["price_delta"]),
        classification=mapping["classification"],
        status=ReplacementEvent.Status.APPROVED if approved else ReplacementEvent.Status.REJECTED,
        decided_by=decided_by,
    )
    logger.info(
        "Replacement %s -> %s on %s %s",
        event.original_product_id,
        event.replacement_product_id,
        order.order_number,
        event.status,
    )
    return event

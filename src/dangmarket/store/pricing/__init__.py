"""Checkout pricing engine.

Pure calculators that turn a CheckoutDraft into OrderTotals. No database
access happens here; see ``dangmarket.store.services`` for the code that
loads reference data and persists orders.
"""

from .calculators import (
    CheckoutResult,
    DEFAULT_POLICY,
    OrderTotals,
    PricingPolicy,
    compute_order,
    quote_order,
)
from .currency import CurrencyConverter
from .exceptions import PricingError
from .types import (
    AccountProfile,
    CartLine,
    CheckoutDraft,
    DeliverySettings,
    GeoPoint,
    PaymentMethod,
    ShopLocation,
    ShoppingListOrder,
)

__all__ = [
    "AccountProfile",
    "CartLine",
    "CheckoutDraft",
    "CheckoutResult",
    "CurrencyConverter",
    "DEFAULT_POLICY",
    "DeliverySettings",
    "GeoPoint",
    "OrderTotals",
    "PaymentMethod",
    "PricingError",
    "PricingPolicy",
    "ShopLocation",
    "ShoppingListOrder",
    "compute_order",
    "quote_order",
]

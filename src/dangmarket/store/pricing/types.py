"""Value objects consumed by the checkout pricing engine.

All of them are frozen dataclasses: the engine never mutates its inputs,
and a checkout draft is rebuilt (``with_changes``) instead of edited.
"""

import math
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from .exceptions import (
    ConfigurationError,
    InvalidLocationError,
    InvalidQuantityError,
    UnknownPaymentMethodError,
)
from .money import ZERO, to_decimal


class PaymentMethod(str, Enum):
    """Payment methods offered at checkout."""

    COD = "cod"
    PAY_AT_PICKUP = "pay_at_pickup"
    CREDIT = "credit"
    ESEWA = "esewa"
    KHALTI = "khalti"
    PAYPAL = "paypal"
    CARD = "card"
    UPI = "upi"
    PHONEPE = "phonepe"
    FONEPAY = "fonepay"

    @classmethod
    def parse(cls, value) -> "PaymentMethod":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise UnknownPaymentMethodError(value) from e

    @property
    def is_international(self) -> bool:
        return self in INTERNATIONAL_PAYMENT_METHODS

    @property
    def is_online(self) -> bool:
        return self in ONLINE_PAYMENT_METHODS


# Charged through a gateway that settles in USD; totals get a USD mirror.
INTERNATIONAL_PAYMENT_METHODS = frozenset({
    PaymentMethod.PAYPAL,
    PaymentMethod.CARD,
    PaymentMethod.UPI,
    PaymentMethod.PHONEPE,
    PaymentMethod.FONEPAY,
})

ONLINE_PAYMENT_METHODS = INTERNATIONAL_PAYMENT_METHODS | {
    PaymentMethod.ESEWA,
    PaymentMethod.KHALTI,
}


class ReplacementClassification(str, Enum):
    HIGHER = "higher"
    LOWER = "lower"
    EQUAL = "equal"


def _money_field(value, name: str) -> Decimal:
    try:
        amount = to_decimal(value)
    except InvalidOperation as e:
        raise ConfigurationError(
            f"{name} must be a number, got {value!r}",
            errors=[f"{name} is not numeric"],
        ) from e
    return amount


@dataclass(frozen=True)
class GeoPoint:
    """A validated latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self):
        try:
            latitude = float(self.latitude)
            longitude = float(self.longitude)
        except (TypeError, ValueError) as e:
            raise InvalidLocationError(
                f"Coordinates must be numeric, got ({self.latitude!r}, {self.longitude!r})",
            ) from e

        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            raise InvalidLocationError("Coordinates must be finite numbers")
        if not -90 <= latitude <= 90:
            raise InvalidLocationError(
                f"Latitude {latitude} out of range [-90, 90]",
                details={"latitude": latitude},
            )
        if not -180 <= longitude <= 180:
            raise InvalidLocationError(
                f"Longitude {longitude} out of range [-180, 180]",
                details={"longitude": longitude},
            )

        object.__setattr__(self, "latitude", latitude)
        object.__setattr__(self, "longitude", longitude)

    @classmethod
    def from_coordinates(cls, latitude, longitude) -> "GeoPoint | None":
        """Build a point, or None when no location was picked at all.

        A half-filled pair is malformed, not absent.
        """
        if latitude in (None, "") and longitude in (None, ""):
            return None
        if latitude in (None, "") or longitude in (None, ""):
            raise InvalidLocationError(
                "Both latitude and longitude are required",
                details={"latitude": latitude, "longitude": longitude},
            )
        return cls(latitude, longitude)


@dataclass(frozen=True)
class ShopLocation:
    """A physical shop that deliveries leave from."""

    id: Any
    name: str
    address: str = ""
    latitude: float | None = None
    longitude: float | None = None
    is_active: bool = True

    def __post_init__(self):
        # Validate eagerly so bad reference data fails when it is loaded.
        point = self.coordinates
        if point is not None:
            object.__setattr__(self, "latitude", point.latitude)
            object.__setattr__(self, "longitude", point.longitude)

    @property
    def coordinates(self) -> GeoPoint | None:
        if self.latitude is None or self.longitude is None:
            return None
        return GeoPoint(self.latitude, self.longitude)

    @classmethod
    def from_record(cls, record: dict) -> "ShopLocation":
        return cls(
            id=record.get("id"),
            name=record.get("name", ""),
            address=record.get("address", "") or "",
            latitude=record.get("latitude"),
            longitude=record.get("longitude"),
            is_active=record.get("is_active", True),
        )


@dataclass(frozen=True)
class DeliverySettings:
    """Distance-based delivery pricing configuration.

    Validated on construction: negative values are rejected when the
    settings are loaded, never per checkout.
    """

    free_delivery_radius_km: Decimal
    min_order_for_free_delivery: Decimal
    base_delivery_fee: Decimal
    per_km_charge: Decimal

    FIELDS = (
        "free_delivery_radius_km",
        "min_order_for_free_delivery",
        "base_delivery_fee",
        "per_km_charge",
    )

    def __post_init__(self):
        errors = []
        for name in self.FIELDS:
            value = _money_field(getattr(self, name), name)
            if value < 0:
                errors.append(f"{name} must not be negative (got {value})")
            object.__setattr__(self, name, value)
        if errors:
            raise ConfigurationError("Invalid delivery settings", errors=errors)

    @classmethod
    def from_record(cls, record: dict) -> "DeliverySettings":
        missing = [name for name in cls.FIELDS if record.get(name) is None]
        if missing:
            raise ConfigurationError(
                "Delivery settings record is incomplete",
                errors=[f"{name} is missing" for name in missing],
            )
        return cls(**{name: record[name] for name in cls.FIELDS})


@dataclass(frozen=True)
class CartLine:
    """One product line in the customer's cart."""

    product_id: Any
    product_name: str
    unit_type: str
    unit_price: Decimal
    quantity: Decimal
    category_name: str = "Other"
    customizations: dict | None = None

    def __post_init__(self):
        try:
            quantity = to_decimal(self.quantity)
        except InvalidOperation as e:
            raise InvalidQuantityError(self.quantity) from e
        if quantity <= 0:
            raise InvalidQuantityError(self.quantity)

        unit_price = _money_field(self.unit_price, "unit_price")
        if unit_price < 0:
            raise ConfigurationError(
                f"Unit price for {self.product_name!r} must not be negative",
                errors=[f"unit_price={unit_price}"],
            )

        object.__setattr__(self, "quantity", quantity)
        object.__setattr__(self, "unit_price", unit_price)

    @property
    def line_id(self):
        return self.product_id

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    @classmethod
    def from_record(cls, record: dict) -> "CartLine":
        """Build a line from the storefront's loose item dict.

        Shopping list items arrive with ``name``/``price``/``unit`` keys,
        cart items with ``product_name``/``unit_price``/``unit_type``.
        """
        return cls(
            product_id=record.get("product_id") or record.get("id"),
            product_name=record.get("product_name") or record.get("name") or "Item",
            unit_type=record.get("unit_type") or record.get("unit") or "pc",
            unit_price=record.get("unit_price") or record.get("price") or 0,
            quantity=record.get("quantity") or 1,
            category_name=record.get("category_name") or record.get("category") or "Other",
            customizations=record.get("customizations"),
        )

    def as_record(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "unit_type": self.unit_type,
            "unit_price": str(self.unit_price),
            "quantity": str(self.quantity),
            "total_price": str(self.line_total),
            "category_name": self.category_name,
            "customizations": self.customizations,
        }


@dataclass(frozen=True)
class ShoppingListOrder:
    """Admin-priced basket merged into checkout as an extra subtotal."""

    list_id: Any
    estimated_total: Decimal | None
    list_items: tuple[CartLine, ...] = ()
    admin_notes: str = ""
    customer_contact: str = ""

    def __post_init__(self):
        object.__setattr__(self, "list_items", tuple(self.list_items))
        if self.estimated_total is not None:
            total = _money_field(self.estimated_total, "estimated_total")
            if total < 0:
                raise ConfigurationError(
                    "Shopping list total must not be negative",
                    errors=[f"estimated_total={total}"],
                )
            object.__setattr__(self, "estimated_total", total)


@dataclass(frozen=True)
class AccountProfile:
    """Account attributes that affect pricing and credit."""

    is_business_account: bool = False
    credit_limit: Decimal | None = None
    current_credit_balance: Decimal | None = None
    credit_payment_terms: str | None = None

    def __post_init__(self):
        for name in ("credit_limit", "current_credit_balance"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, _money_field(value, name))

    @property
    def available_credit(self) -> Decimal:
        if self.credit_limit is None:
            return ZERO
        return self.credit_limit - (self.current_credit_balance or ZERO)


GUEST_ACCOUNT = AccountProfile()


@dataclass(frozen=True)
class ReplacementMapping:
    """Customer-chosen substitute for a cart line, pending admin approval."""

    original_line_id: Any
    replacement_line: CartLine
    price_delta: Decimal
    classification: ReplacementClassification

    def as_record(self) -> dict:
        return {
            "original_line_id": self.original_line_id,
            "replacement": self.replacement_line.as_record(),
            "price_delta": str(self.price_delta),
            "classification": self.classification.value,
        }


@dataclass(frozen=True)
class CheckoutDraft:
    """Everything the customer has chosen so far at checkout."""

    cart_lines: tuple[CartLine, ...] = ()
    shopping_list: ShoppingListOrder | None = None
    account: AccountProfile | None = None
    delivery_method: str = "home"
    destination: GeoPoint | None = None
    payment_method: str = PaymentMethod.COD.value
    is_international: bool = False
    is_gift: bool = False
    replacements: tuple[ReplacementMapping, ...] = field(default=())

    def __post_init__(self):
        object.__setattr__(self, "cart_lines", tuple(self.cart_lines))
        object.__setattr__(self, "replacements", tuple(self.replacements))

    def with_changes(self, **changes) -> "CheckoutDraft":
        """Return a new draft with the given fields replaced."""
        return replace(self, **changes)

    @property
    def effective_account(self) -> AccountProfile:
        return self.account or GUEST_ACCOUNT

    @property
    def shopping_list_subtotal(self) -> Decimal:
        if self.shopping_list is None or self.shopping_list.estimated_total is None:
            return ZERO
        return self.shopping_list.estimated_total

    @property
    def cart_subtotal(self) -> Decimal:
        return sum((line.line_total for line in self.cart_lines), ZERO)

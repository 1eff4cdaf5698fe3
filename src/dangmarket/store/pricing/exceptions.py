"""Pricing exceptions.

Every failure the checkout engine can report is a PricingError subclass with
a stable ``code`` so the UI/API layer can render a specific message.
"""

from decimal import Decimal


class PricingError(Exception):
    """Base class for checkout pricing failures."""

    code = "pricing_error"

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "details": self.details}


class InvalidQuantityError(PricingError):
    """Quantity is zero, negative or not a number."""

    code = "invalid_quantity"

    def __init__(self, quantity):
        self.quantity = quantity
        super().__init__(
            f"Quantity must be a positive number, got {quantity!r}",
            details={"quantity": str(quantity)},
        )


class IncompatibleUnitError(PricingError):
    """Units belong to different measurement families (e.g. kg -> liter)."""

    code = "incompatible_unit"

    def __init__(self, from_unit, to_unit):
        self.from_unit = from_unit
        self.to_unit = to_unit
        super().__init__(
            f"Cannot convert from '{from_unit}' to '{to_unit}'",
            details={"from_unit": str(from_unit), "to_unit": str(to_unit)},
        )


class InvalidLocationError(PricingError):
    """Coordinates are missing parts, non-numeric or out of range."""

    code = "invalid_location"


class ConfigurationError(PricingError):
    """Pricing configuration (delivery settings, rates) is unusable."""

    code = "invalid_configuration"

    def __init__(self, message: str, errors: list[str] | None = None):
        self.errors = errors or []
        super().__init__(message, details={"errors": self.errors})


class InsufficientCreditError(PricingError):
    """Credit payment exceeds the account's remaining credit."""

    code = "insufficient_credit"

    def __init__(self, required: Decimal, available: Decimal):
        self.required = required
        self.available = available
        super().__init__(
            f"Insufficient credit: order total {required} exceeds available credit {available}",
            details={"required": str(required), "available": str(available)},
        )


class UnknownPaymentMethodError(PricingError):
    """Payment method is outside the supported set."""

    code = "unknown_payment_method"

    def __init__(self, method):
        self.method = method
        super().__init__(
            f"Unknown payment method: {method!r}",
            details={"payment_method": str(method)},
        )


class UnknownDeliveryMethodError(PricingError):
    """Delivery method is neither pickup nor home delivery."""

    code = "unknown_delivery_method"

    def __init__(self, method):
        self.method = method
        super().__init__(
            f"Unknown delivery method: {method!r}",
            details={"delivery_method": str(method)},
        )


class EmptyOrderError(PricingError):
    """Nothing to charge for: no cart lines and no shopping list total."""

    code = "empty_order"

    def __init__(self, message: str = "Order has no cart lines and no shopping list total"):
        super().__init__(message)


class ShoppingListNotPayableError(PricingError):
    """Shopping list is not awaiting payment (unpriced, paid or cancelled)."""

    code = "shopping_list_not_payable"

    def __init__(self, list_id, status):
        self.list_id = list_id
        self.status = status
        super().__init__(
            f"Shopping list {list_id} cannot be paid while {status}",
            details={"list_id": str(list_id), "status": str(status)},
        )


class UnsupportedCurrencyError(PricingError):
    """Currency code has no configured exchange rate."""

    code = "unsupported_currency"

    def __init__(self, currency):
        self.currency = currency
        super().__init__(
            f"No exchange rate configured for currency {currency!r}",
            details={"currency": str(currency)},
        )

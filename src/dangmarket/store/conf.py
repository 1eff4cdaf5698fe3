"""Storefront pricing configuration."""

from decimal import Decimal, InvalidOperation

from django.conf import settings

from .pricing.calculators import PricingPolicy
from .pricing.currency import DEFAULT_RATES, CurrencyConverter
from .pricing.exceptions import ConfigurationError
from .pricing.money import to_decimal


def get_config():
    """Get storefront configuration from settings."""
    defaults = {
        'SHOP_NAME': 'Dang Market',

        # NPR per one unit of foreign currency
        'EXCHANGE_RATES': dict(DEFAULT_RATES),

        # Wholesale discount for business accounts
        'BUSINESS_DISCOUNT_RATE': Decimal('0.10'),

        # Flat delivery rule used when distance pricing is unavailable
        'LEGACY_FREE_DELIVERY_THRESHOLD': Decimal('500'),
        'LEGACY_DELIVERY_FEE': Decimal('50'),
    }

    user_config = getattr(settings, 'STOREFRONT', {})
    return {**defaults, **user_config}


def get_setting(name, default=None):
    """Get a specific storefront setting."""
    config = get_config()
    return config.get(name, default)


def get_currency_converter():
    """Build a CurrencyConverter from the configured exchange rates."""
    config = get_config()
    return CurrencyConverter(config.get('EXCHANGE_RATES'))


def get_pricing_policy():
    """Build the PricingPolicy from settings.

    Raises:
        ConfigurationError: a value is not numeric or is negative
    """
    config = get_config()
    errors = []
    values = {}
    for field, key in (
        ('business_discount_rate', 'BUSINESS_DISCOUNT_RATE'),
        ('legacy_free_delivery_threshold', 'LEGACY_FREE_DELIVERY_THRESHOLD'),
        ('legacy_delivery_fee', 'LEGACY_DELIVERY_FEE'),
    ):
        raw = config.get(key)
        try:
            value = to_decimal(raw)
        except InvalidOperation:
            errors.append(f"{key} is not numeric ({raw!r})")
            continue
        if value < 0:
            errors.append(f"{key} must not be negative (got {value})")
            continue
        values[field] = value

    rate = values.get('business_discount_rate')
    if rate is not None and rate > 1:
        errors.append(f"BUSINESS_DISCOUNT_RATE must be at most 1 (got {rate})")

    if errors:
        raise ConfigurationError("Invalid STOREFRONT settings", errors=errors)
    return PricingPolicy(**values)

"""Tests for storefront configuration."""

from decimal import Decimal

import pytest
from django.test import override_settings

from dangmarket.store.conf import get_config, get_currency_converter, get_pricing_policy, get_setting
from dangmarket.store.pricing.calculators import DEFAULT_POLICY
from dangmarket.store.pricing.exceptions import ConfigurationError


class TestGetConfig:
    @override_settings(STOREFRONT={})
    def test_defaults(self):
        config = get_config()
        assert config["SHOP_NAME"] == "Dang Market"
        assert config["EXCHANGE_RATES"]["USD"] == Decimal("133.5")

    @override_settings(STOREFRONT={"SHOP_NAME": "Dang Bazaar"})
    def test_user_config_overrides_defaults(self):
        assert get_setting("SHOP_NAME") == "Dang Bazaar"
        assert get_setting("LEGACY_DELIVERY_FEE") == Decimal("50")
        assert get_setting("MISSING", "fallback") == "fallback"


class TestGetPricingPolicy:
    @override_settings(STOREFRONT={})
    def test_default_policy(self):
        assert get_pricing_policy() == DEFAULT_POLICY

    @override_settings(STOREFRONT={"LEGACY_DELIVERY_FEE": "75", "BUSINESS_DISCOUNT_RATE": 0.05})
    def test_values_from_settings(self):
        policy = get_pricing_policy()
        assert policy.legacy_delivery_fee == Decimal("75")
        assert policy.business_discount_rate == Decimal("0.05")

    @override_settings(STOREFRONT={"LEGACY_DELIVERY_FEE": "-1", "BUSINESS_DISCOUNT_RATE": "lots"})
    def test_invalid_values(self):
        with pytest.raises(ConfigurationError) as exc_info:
            get_pricing_policy()
        assert len(exc_info.value.errors) == 2

    @override_settings(STOREFRONT={"BUSINESS_DISCOUNT_RATE": "1.5"})
    def test_discount_rate_above_one(self):
        with pytest.raises(ConfigurationError):
            get_pricing_policy()


class TestGetCurrencyConverter:
    @override_settings(STOREFRONT={"EXCHANGE_RATES": {"USD": "140", "INR": "1.6"}})
    def test_configured_rates(self):
        converter = get_currency_converter()
        assert converter.rate("USD") == Decimal("140")
        assert converter.to_usd(Decimal("1400")) == Decimal("10.00")

    @override_settings(STOREFRONT={"EXCHANGE_RATES": {"USD": "0"}})
    def test_invalid_rates(self):
        with pytest.raises(ConfigurationError):
            get_currency_converter()

"""Tests for order total calculation.

Covers the checkout scenarios the storefront relies on:

- flat delivery fee when no location is picked
- distance pricing inside and outside the free radius
- business discount with pickup
- USD mirror for internationally settled payments
- credit payments against the account's limit
"""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import patch

import pytest

from ..calculators import DEFAULT_POLICY, PricingPolicy, compute_order, quote_order
from ..currency import CurrencyConverter
from ..delivery import DeliveryMethod, DeliveryRule, compute_delivery_fee
from ..exceptions import (
    EmptyOrderError,
    InsufficientCreditError,
    PricingError,
    UnknownDeliveryMethodError,
    UnknownPaymentMethodError,
)
from ..types import (
    AccountProfile,
    CartLine,
    CheckoutDraft,
    DeliverySettings,
    GeoPoint,
    PaymentMethod,
    ShopLocation,
    ShoppingListOrder,
)

KM_PER_DEGREE = 111.19492664455873

SHOP = ShopLocation(id=1, name="Thamel", latitude=27.7172, longitude=85.3240)
NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)

SETTINGS = DeliverySettings(
    free_delivery_radius_km=Decimal("10"),
    min_order_for_free_delivery=Decimal("500"),
    base_delivery_fee=Decimal("50"),
    per_km_charge=Decimal("10"),
)

BUSINESS = AccountProfile(
    is_business_account=True,
    credit_limit=Decimal("5000"),
    current_credit_balance=Decimal("1000"),
    credit_payment_terms="monthly",
)


def km_north(km):
    return GeoPoint(SHOP.latitude + km / KM_PER_DEGREE, SHOP.longitude)


def cart(*prices):
    return [
        CartLine(product_id=i, product_name=f"Item {i}", unit_type="pc", unit_price=Decimal(p), quantity=1)
        for i, p in enumerate(prices, start=1)
    ]


def assert_totals_consistent(totals):
    assert totals.grand_total == totals.subtotal - totals.business_discount + totals.delivery_fee
    assert totals.grand_total >= 0
    assert totals.grand_total == totals.grand_total.to_integral_value()


class TestCheckoutScenarios:
    """End-to-end totals for typical checkouts."""

    def test_no_location_uses_flat_fee(self):
        """450 NPR home delivery without a picked location: fee 50, total 500."""
        draft = CheckoutDraft(cart_lines=cart("450"), delivery_method="home")

        totals = compute_order(draft, shops=[SHOP], delivery_settings=SETTINGS)

        assert totals.subtotal == Decimal("450")
        assert totals.delivery_fee == Decimal("50")
        assert totals.grand_total == Decimal("500")
        assert totals.delivery_rule is DeliveryRule.LEGACY
        assert_totals_consistent(totals)

    def test_inside_free_radius(self):
        """600 NPR, 3 km from the shop: free delivery, total 600."""
        draft = CheckoutDraft(cart_lines=cart("600"), destination=km_north(3))

        totals = compute_order(draft, shops=[SHOP], delivery_settings=SETTINGS)

        assert totals.delivery_fee == Decimal("0")
        assert totals.grand_total == Decimal("600")
        assert totals.delivery_rule is DeliveryRule.FREE_RADIUS
        assert totals.nearest_shop_id == 1
        assert totals.nearest_distance_km == Decimal("3.000")

    def test_outside_free_radius(self):
        """14.6 km from the shop: 50 + 5 started km * 10 = 100."""
        draft = CheckoutDraft(cart_lines=cart("600"), destination=km_north(14.6))

        totals = compute_order(draft, shops=[SHOP], delivery_settings=SETTINGS)

        assert totals.delivery_fee == Decimal("100")
        assert totals.grand_total == Decimal("700")
        assert totals.delivery_rule is DeliveryRule.DISTANCE
        assert_totals_consistent(totals)

    def test_business_pickup(self):
        """Business account, 1000 NPR, pickup: discount 100, total 900."""
        draft = CheckoutDraft(cart_lines=cart("1000"), account=BUSINESS, delivery_method="pickup")

        totals = compute_order(draft, shops=[SHOP], delivery_settings=SETTINGS)

        assert totals.business_discount == Decimal("100")
        assert totals.delivery_fee == Decimal("0")
        assert totals.grand_total == Decimal("900")
        assert totals.delivery_rule is DeliveryRule.PICKUP
        assert totals.delivery_method is DeliveryMethod.PICKUP
        assert_totals_consistent(totals)

    def test_international_payment_gets_usd_mirror(self):
        """1000 NPR paid with PayPal at 133.5 NPR/USD is $7.49."""
        draft = CheckoutDraft(cart_lines=cart("1000"), payment_method="paypal")

        totals = compute_order(draft, converter=CurrencyConverter({"USD": "133.5"}))

        assert totals.grand_total == Decimal("1000")
        assert totals.grand_total_usd == Decimal("7.49")

    @pytest.mark.parametrize("method", ["cod", "esewa", "khalti", "pay_at_pickup"])
    def test_domestic_payment_has_no_usd_mirror(self, method):
        draft = CheckoutDraft(cart_lines=cart("1000"), payment_method=method)
        assert compute_order(draft).grand_total_usd is None


class TestOrderRules:
    def test_business_home_delivery_is_free(self):
        """Business accounts never pay delivery, even far outside the radius."""
        business = AccountProfile(is_business_account=True)
        draft = CheckoutDraft(cart_lines=cart("520"), account=business, destination=km_north(30))

        totals = compute_order(draft, shops=[SHOP], delivery_settings=SETTINGS)

        assert totals.business_discount == Decimal("52")
        assert totals.delivery_fee == Decimal("0")
        assert totals.delivery_rule is DeliveryRule.BUSINESS
        assert totals.grand_total == Decimal("468")

    def test_free_threshold_checks_pre_discount_subtotal(self):
        """The fee calculator gets the subtotal before any discount."""
        draft = CheckoutDraft(cart_lines=cart("500"), destination=km_north(3))
        with patch(
            "dangmarket.store.pricing.calculators.compute_delivery_fee",
            wraps=compute_delivery_fee,
        ) as mock_fee:
            totals = compute_order(draft, shops=[SHOP], delivery_settings=SETTINGS)

        assert mock_fee.call_args.kwargs["order_subtotal"] == Decimal("500")
        assert totals.delivery_fee == Decimal("0")

    def test_below_minimum_inside_radius_pays_base_fee(self):
        draft = CheckoutDraft(cart_lines=cart("499"), destination=km_north(3))

        totals = compute_order(draft, shops=[SHOP], delivery_settings=SETTINGS)

        assert totals.delivery_fee == Decimal("50")
        assert totals.delivery_rule is DeliveryRule.BELOW_MINIMUM

    def test_shopping_list_merges_into_subtotal(self):
        draft = CheckoutDraft(
            cart_lines=cart("150"),
            shopping_list=ShoppingListOrder(list_id=9, estimated_total=Decimal("400")),
        )

        totals = compute_order(draft)

        assert totals.shopping_list_subtotal == Decimal("400")
        assert totals.cart_subtotal == Decimal("150")
        assert totals.subtotal == Decimal("550")
        assert totals.delivery_fee == Decimal("0")

    def test_shopping_list_only_order(self):
        draft = CheckoutDraft(shopping_list=ShoppingListOrder(list_id=9, estimated_total="320"))
        totals = compute_order(draft)
        assert totals.subtotal == Decimal("320")
        assert totals.grand_total == Decimal("370")

    def test_fractional_prices_round_to_whole_rupees(self):
        lines = [CartLine("p1", "Rice", "kg", "95.50", "2.5"), CartLine("p2", "Salt", "pc", "22.25", 1)]
        totals = compute_order(CheckoutDraft(cart_lines=lines, account=AccountProfile(True)))
        # 238.75 + 22.25 = 261.00; 10% = 26.1 -> 26
        assert totals.subtotal == Decimal("261")
        assert totals.business_discount == Decimal("26")
        assert_totals_consistent(totals)

    def test_custom_policy(self):
        policy = PricingPolicy(
            business_discount_rate=Decimal("0.05"),
            legacy_free_delivery_threshold=Decimal("1000"),
            legacy_delivery_fee=Decimal("75"),
        )
        draft = CheckoutDraft(cart_lines=cart("800"), account=AccountProfile(True), delivery_method="pickup")
        totals = compute_order(draft, policy=policy)
        assert totals.business_discount == Decimal("40")

        guest = compute_order(CheckoutDraft(cart_lines=cart("800")), policy=policy)
        assert guest.delivery_fee == Decimal("75")

    def test_same_inputs_same_totals(self):
        draft = CheckoutDraft(
            cart_lines=cart("333.33", "120"),
            account=BUSINESS,
            destination=km_north(12.3),
            payment_method="credit",
        )
        kwargs = {"shops": [SHOP], "delivery_settings": SETTINGS, "now": NOW}

        first = compute_order(draft, **kwargs)
        assert all(compute_order(draft, **kwargs) == first for _ in range(5))

    def test_inputs_are_not_modified(self):
        lines = cart("100", "200")
        draft = CheckoutDraft(cart_lines=lines, destination=km_north(3))
        snapshot = CheckoutDraft(cart_lines=cart("100", "200"), destination=km_north(3))

        compute_order(draft, shops=[SHOP], delivery_settings=SETTINGS)

        assert draft == snapshot

    def test_as_record_uses_order_field_names(self):
        totals = compute_order(CheckoutDraft(cart_lines=cart("450")))
        record = totals.as_record()
        assert record["total_amount"] == Decimal("500")
        assert record["shopping_list_total"] == Decimal("0")
        assert record["total_amount_usd"] is None
        assert record["delivery_rule"] == "legacy"


class TestCreditPayments:
    def test_credit_within_limit(self):
        draft = CheckoutDraft(cart_lines=cart("1000"), account=BUSINESS, payment_method="credit")

        totals = compute_order(draft, now=NOW)

        assert totals.grand_total == Decimal("900")
        assert totals.payment_method is PaymentMethod.CREDIT
        assert totals.credit_due_date == datetime(2024, 4, 15, 12, 0, tzinfo=timezone.utc)

    def test_credit_over_limit_raises(self):
        draft = CheckoutDraft(cart_lines=cart("5000"), account=BUSINESS, payment_method="credit")
        with pytest.raises(InsufficientCreditError) as exc_info:
            compute_order(draft, now=NOW)
        assert exc_info.value.available == Decimal("4000")
        assert exc_info.value.required == Decimal("4500")

    def test_guest_cannot_pay_on_credit(self):
        draft = CheckoutDraft(cart_lines=cart("100"), payment_method="credit")
        with pytest.raises(InsufficientCreditError):
            compute_order(draft, now=NOW)

    def test_clock_is_read_only_for_credit(self):
        with patch("dangmarket.store.pricing.calculators.timezone.now") as mock_now:
            compute_order(CheckoutDraft(cart_lines=cart("100")))
            mock_now.assert_not_called()

            mock_now.return_value = NOW
            draft = CheckoutDraft(cart_lines=cart("100"), account=BUSINESS, payment_method="credit")
            totals = compute_order(draft)
            assert totals.credit_due_date == datetime(2024, 4, 15, 12, 0, tzinfo=timezone.utc)


class TestValidation:
    def test_empty_order(self):
        with pytest.raises(EmptyOrderError) as exc_info:
            compute_order(CheckoutDraft())
        assert exc_info.value.code == "empty_order"

    def test_shopping_list_without_total(self):
        draft = CheckoutDraft(shopping_list=ShoppingListOrder(list_id=1, estimated_total=None))
        with pytest.raises(EmptyOrderError, match="total is missing"):
            compute_order(draft)

    def test_unknown_payment_method(self):
        draft = CheckoutDraft(cart_lines=cart("100"), payment_method="cheque")
        with pytest.raises(UnknownPaymentMethodError):
            compute_order(draft)

    def test_unknown_delivery_method(self):
        draft = CheckoutDraft(cart_lines=cart("100"), delivery_method="courier")
        with pytest.raises(UnknownDeliveryMethodError):
            compute_order(draft)


class TestQuoteOrder:
    """quote_order reports failures as a result value."""

    def test_success(self):
        result = quote_order(CheckoutDraft(cart_lines=cart("450")))
        assert result.ok
        assert result.totals.grand_total == Decimal("500")
        assert result.error is None

    @pytest.mark.parametrize("draft,code", [
        (CheckoutDraft(), "empty_order"),
        (CheckoutDraft(cart_lines=cart("100"), payment_method="cheque"), "unknown_payment_method"),
        (CheckoutDraft(cart_lines=cart("100"), payment_method="credit"), "insufficient_credit"),
    ])
    def test_failures_are_returned(self, draft, code):
        result = quote_order(draft, now=NOW)
        assert not result.ok
        assert result.totals is None
        assert isinstance(result.error, PricingError)
        assert result.error.as_dict()["code"] == code

    def test_passes_options_through(self):
        draft = CheckoutDraft(cart_lines=cart("600"), destination=km_north(3))
        result = quote_order(draft, shops=[SHOP], delivery_settings=SETTINGS, policy=DEFAULT_POLICY)
        assert result.totals.delivery_rule is DeliveryRule.FREE_RADIUS

    def test_antipodal_destination_is_priced(self):
        shop = ShopLocation(id=1, name="Far north", latitude=89.59799164833686, longitude=133.22056586673614)
        draft = CheckoutDraft(
            cart_lines=cart("600"),
            destination=GeoPoint(-89.59799164833686, -46.77943413326386),
        )
        result = quote_order(draft, shops=[shop], delivery_settings=SETTINGS)
        assert result.ok
        assert result.totals.delivery_rule is DeliveryRule.DISTANCE
        # 20015.087 km: 20006 started km beyond the 10 km radius.
        assert result.totals.delivery_fee == Decimal("200110")

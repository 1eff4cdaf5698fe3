"""Shared pytest fixtures for dangmarket.store tests."""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from dangmarket.store.models import DeliverySettings, ShopLocation, ShoppingList
from dangmarket.store.pricing.types import CartLine, CheckoutDraft, GeoPoint

User = get_user_model()

# One degree of latitude along a meridian, in km, for a 6371 km sphere.
KM_PER_DEGREE = 111.19492664455873


@pytest.fixture
def customer(db):
    """Create a regular (non-business) customer."""
    return User.objects.create_user(email="sita@example.com", password="testpass123")


@pytest.fixture
def business_customer(db):
    """Create a business customer with monthly credit terms."""
    return User.objects.create_user(
        email="hotel@example.com",
        password="testpass123",
        is_business_account=True,
        credit_limit=Decimal("5000"),
        current_credit_balance=Decimal("1000"),
        credit_payment_terms=User.CreditPaymentTerms.MONTHLY,
    )


@pytest.fixture
def shop(db):
    """Create the main shop in Thamel."""
    return ShopLocation.objects.create(
        name="Thamel",
        address="Thamel Marg, Kathmandu",
        latitude=Decimal("27.717200"),
        longitude=Decimal("85.324000"),
    )


@pytest.fixture
def delivery_settings(db):
    """Create the standard delivery settings: 10 km free over Rs. 500."""
    return DeliverySettings.objects.create(
        free_delivery_radius_km=Decimal("10"),
        min_order_for_free_delivery=Decimal("500"),
        base_delivery_fee=Decimal("50"),
        per_km_charge=Decimal("10"),
    )


@pytest.fixture
def priced_shopping_list(db, customer):
    """Create a shopping list an admin has priced."""
    return ShoppingList.objects.create(
        customer=customer,
        list_text="2 kg rice\n1 l mustard oil",
        items=[
            {"name": "Rice", "price": "95", "unit": "kg", "quantity": 2},
            {"name": "Mustard oil", "price": "260", "unit": "liter", "quantity": 1},
        ],
        estimated_total=Decimal("450"),
        status=ShoppingList.Status.PRICED,
    )


def km_north(shop, km):
    """Point ``km`` kilometres due north of ``shop``."""
    return GeoPoint(float(shop.latitude) + km / KM_PER_DEGREE, float(shop.longitude))


def cart_draft(*prices, **changes):
    lines = [
        CartLine(product_id=f"p{i}", product_name=f"Item {i}", unit_type="pc", unit_price=Decimal(p), quantity=1)
        for i, p in enumerate(prices, start=1)
    ]
    return CheckoutDraft(cart_lines=lines, **changes)

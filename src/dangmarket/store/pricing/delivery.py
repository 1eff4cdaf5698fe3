"""Delivery fee calculation.

The fee depends on how far the customer is from the nearest active shop
and on the admin-configured DeliverySettings. When distance pricing cannot
be applied (no picked location, no shops, no settings) the legacy flat rule
is used: free at or above 500 NPR, otherwise 50 NPR. Orders placed before
geolocation existed were priced that way and must stay reproducible.
"""

import logging
import math
from decimal import Decimal, ROUND_CEILING, ROUND_HALF_EVEN
from enum import Enum
from typing import NamedTuple, Sequence

from .exceptions import UnknownDeliveryMethodError
from .money import ZERO, round_npr, to_decimal
from .types import DeliverySettings, GeoPoint, ShopLocation

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0

LEGACY_FREE_DELIVERY_THRESHOLD = Decimal("500")
LEGACY_DELIVERY_FEE = Decimal("50")

# Distances are compared and billed at metre precision.
DISTANCE_QUANTUM = Decimal("0.001")


class DeliveryMethod(str, Enum):
    PICKUP = "pickup"
    HOME = "home"

    @classmethod
    def parse(cls, value) -> "DeliveryMethod":
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        if normalized == "home_delivery":
            return cls.HOME
        try:
            return cls(normalized)
        except ValueError as e:
            raise UnknownDeliveryMethodError(value) from e


class DeliveryRule(str, Enum):
    """Which branch of the fee rules produced the fee."""

    PICKUP = "pickup"
    BUSINESS = "business"
    LEGACY = "legacy"
    FREE_RADIUS = "free_radius"
    BELOW_MINIMUM = "below_minimum"
    DISTANCE = "distance"


class NearestShop(NamedTuple):
    shop: ShopLocation
    distance_km: Decimal


class DeliveryFeeResult(NamedTuple):
    """Result of delivery fee calculation."""

    fee: Decimal
    rule: DeliveryRule
    nearest_shop: ShopLocation | None = None
    distance_km: Decimal | None = None


def haversine_km(origin: GeoPoint, destination: GeoPoint) -> Decimal:
    """Great-circle distance in kilometres, quantized to metres."""
    lat1 = math.radians(origin.latitude)
    lat2 = math.radians(destination.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(destination.longitude - origin.longitude)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    # Float error can push ``a`` just past 1 for antipodal points.
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    distance = EARTH_RADIUS_KM * c

    return Decimal(repr(distance)).quantize(DISTANCE_QUANTUM, rounding=ROUND_HALF_EVEN)


def find_nearest_shop(
    destination: GeoPoint,
    shops: Sequence[ShopLocation],
) -> NearestShop | None:
    """Find the closest active shop that has coordinates.

    Ties keep the shop that comes first in ``shops``.
    """
    nearest = None
    for shop in shops:
        point = shop.coordinates
        if not shop.is_active or point is None:
            continue
        distance = haversine_km(destination, point)
        if nearest is None or distance < nearest.distance_km:
            nearest = NearestShop(shop, distance)
    return nearest


def legacy_flat_fee(
    order_subtotal: Decimal,
    threshold: Decimal = LEGACY_FREE_DELIVERY_THRESHOLD,
    flat_fee: Decimal = LEGACY_DELIVERY_FEE,
) -> Decimal:
    return ZERO if order_subtotal >= threshold else flat_fee


def calculate_distance_fee(
    distance_km,
    order_subtotal,
    settings: DeliverySettings,
) -> tuple[Decimal, DeliveryRule]:
    """Apply the distance tiers of DeliverySettings.

    Inside the free radius (inclusive) delivery is free once the order
    reaches the minimum (inclusive), otherwise the base fee applies.
    Outside it every started kilometre beyond the radius costs
    ``per_km_charge`` on top of the base fee.
    """
    distance = to_decimal(distance_km)
    subtotal = to_decimal(order_subtotal)

    if distance <= settings.free_delivery_radius_km:
        if subtotal >= settings.min_order_for_free_delivery:
            return ZERO, DeliveryRule.FREE_RADIUS
        return round_npr(settings.base_delivery_fee), DeliveryRule.BELOW_MINIMUM

    extra_km = (distance - settings.free_delivery_radius_km).to_integral_value(
        rounding=ROUND_CEILING
    )
    fee = settings.base_delivery_fee + extra_km * settings.per_km_charge
    return round_npr(fee), DeliveryRule.DISTANCE


def compute_delivery_fee(
    destination: GeoPoint | None,
    shops: Sequence[ShopLocation],
    settings: DeliverySettings | None,
    order_subtotal,
    delivery_method=DeliveryMethod.HOME,
    is_business_account: bool = False,
    legacy_threshold: Decimal = LEGACY_FREE_DELIVERY_THRESHOLD,
    legacy_fee: Decimal = LEGACY_DELIVERY_FEE,
) -> DeliveryFeeResult:
    """Calculate the delivery fee for an order.

    Args:
        destination: Customer's picked location, or None if not picked
        shops: Shop locations in a stable order (first wins distance ties)
        settings: Active DeliverySettings, or None if none are configured
        order_subtotal: Pre-discount subtotal used for free-delivery checks
        delivery_method: "pickup" or "home"
        is_business_account: Business accounts never pay delivery
        legacy_threshold: Flat-rule free-delivery threshold
        legacy_fee: Flat-rule fee below the threshold

    Returns:
        DeliveryFeeResult with the fee, the rule applied and, when a
        distance was computed, the nearest shop and its distance

    Raises:
        UnknownDeliveryMethodError: delivery_method is not recognised
    """
    method = DeliveryMethod.parse(delivery_method)
    subtotal = to_decimal(order_subtotal)

    if method is DeliveryMethod.PICKUP:
        return DeliveryFeeResult(fee=ZERO, rule=DeliveryRule.PICKUP)
    if is_business_account:
        return DeliveryFeeResult(fee=ZERO, rule=DeliveryRule.BUSINESS)

    if destination is None or not shops:
        return DeliveryFeeResult(
            fee=legacy_flat_fee(subtotal, legacy_threshold, legacy_fee),
            rule=DeliveryRule.LEGACY,
        )

    nearest = find_nearest_shop(destination, shops)
    if nearest is None:
        logger.warning("No active shop with coordinates; using flat delivery fee")
        return DeliveryFeeResult(
            fee=legacy_flat_fee(subtotal, legacy_threshold, legacy_fee),
            rule=DeliveryRule.LEGACY,
        )

    if settings is None:
        return DeliveryFeeResult(
            fee=legacy_flat_fee(subtotal, legacy_threshold, legacy_fee),
            rule=DeliveryRule.LEGACY,
            nearest_shop=nearest.shop,
            distance_km=nearest.distance_km,
        )

    fee, rule = calculate_distance_fee(nearest.distance_km, subtotal, settings)
    return DeliveryFeeResult(
        fee=fee,
        rule=rule,
        nearest_shop=nearest.shop,
        distance_km=nearest.distance_km,
    )

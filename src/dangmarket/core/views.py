"""Core views for the storefront."""

import logging

from django.db import DatabaseError
from django.http import JsonResponse

from dangmarket.store.pricing.exceptions import PricingError
from dangmarket.store.repositories import DjangoDeliverySettingsRepository

logger = logging.getLogger(__name__)


def health_check(request):
    """Liveness probe: database reachable and checkout pricing loadable.

    ``delivery_pricing`` is ``distance`` when delivery settings exist and
    ``flat`` when checkout falls back to the legacy fee.
    """
    try:
        settings = DjangoDeliverySettingsRepository().get_active_settings()
    except DatabaseError as e:
        logger.error("Health check failed: %s", e)
        return JsonResponse({"status": "unhealthy", "database": "unavailable"}, status=503)
    except PricingError as e:
        logger.error("Health check found invalid delivery settings: %s", e.as_dict())
        return JsonResponse(
            {"status": "unhealthy", "database": "connected", "error": e.code},
            status=503,
        )

    return JsonResponse({
        "status": "healthy",
        "database": "connected",
        "delivery_pricing": "distance" if settings is not None else "flat",
    })

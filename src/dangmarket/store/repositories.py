"""Access to the pricing reference data.

Checkout reads shops and delivery settings through these narrow
contracts so the pricing engine never touches the ORM. The Django
implementations are the defaults; the in-memory ones serve tests and
scripts that run without a database.
"""

import itertools
import logging
from dataclasses import replace
from typing import Protocol, Sequence

from .models import DeliverySettings, ShopLocation
from .pricing.types import DeliverySettings as DeliverySettingsValue
from .pricing.types import ShopLocation as ShopLocationValue

logger = logging.getLogger(__name__)


class ShopLocationRepository(Protocol):
    def list(self) -> Sequence[ShopLocationValue]: ...

    def upsert(self, shop: ShopLocationValue) -> ShopLocationValue: ...


class DeliverySettingsRepository(Protocol):
    def list(self) -> Sequence[DeliverySettingsValue]: ...

    def upsert(self, settings: DeliverySettingsValue) -> DeliverySettingsValue: ...

    def get_active_settings(self) -> DeliverySettingsValue | None: ...


def _first_settings(rows: Sequence, source: str):
    if not rows:
        return None
    if len(rows) > 1:
        logger.warning(
            "%d delivery settings rows found in %s; using the oldest",
            len(rows),
            source,
        )
    return rows[0]


class DjangoShopLocationRepository:
    """Shops stored in the ShopLocation table, oldest first."""

    def list(self) -> Sequence[ShopLocationValue]:
        return [shop.to_value() for shop in ShopLocation.objects.order_by("created_at", "pk")]

    def upsert(self, shop: ShopLocationValue) -> ShopLocationValue:
        fields = {
            "name": shop.name,
            "address": shop.address,
            "latitude": shop.latitude,
            "longitude": shop.longitude,
            "is_active": shop.is_active,
        }
        if shop.id is None:
            record = ShopLocation.objects.create(**fields)
        else:
            record, _ = ShopLocation.objects.update_or_create(pk=shop.id, defaults=fields)
        return record.to_value()


class DjangoDeliverySettingsRepository:
    """Delivery settings stored in the DeliverySettings table.

    One row is expected. When admins have created several, the oldest by
    ``(created_at, pk)`` wins so every checkout prices the same way.
    """

    def _rows(self):
        return list(DeliverySettings.objects.order_by("created_at", "pk"))

    def list(self) -> Sequence[DeliverySettingsValue]:
        return [row.to_value() for row in self._rows()]

    def upsert(self, settings: DeliverySettingsValue) -> DeliverySettingsValue:
        fields = {name: getattr(settings, name) for name in DeliverySettingsValue.FIELDS}
        record = DeliverySettings.objects.order_by("created_at", "pk").first()
        if record is None:
            record = DeliverySettings.objects.create(**fields)
        else:
            for name, value in fields.items():
                setattr(record, name, value)
            record.save()
        return record.to_value()

    def get_active_settings(self) -> DeliverySettingsValue | None:
        """The effective settings, or None to fall back to the flat fee.

        Raises:
            ConfigurationError: the stored row holds invalid values
        """
        row = _first_settings(self._rows(), "database")
        return row.to_value() if row is not None else None


class InMemoryShopLocationRepository:
    """Shops kept in a list; new shops get sequential integer ids."""

    def __init__(self, shops: Sequence[ShopLocationValue] = ()):
        self._shops = list(shops)
        existing = [shop.id for shop in self._shops if isinstance(shop.id, int)]
        self._ids = itertools.count(max(existing, default=0) + 1)

    def list(self) -> Sequence[ShopLocationValue]:
        return tuple(self._shops)

    def upsert(self, shop: ShopLocationValue) -> ShopLocationValue:
        if shop.id is None:
            shop = replace(shop, id=next(self._ids))
        for index, existing in enumerate(self._shops):
            if existing.id == shop.id:
                self._shops[index] = shop
                return shop
        self._shops.append(shop)
        return shop


class InMemoryDeliverySettingsRepository:
    def __init__(self, settings: Sequence[DeliverySettingsValue] = ()):
        self._settings = list(settings)

    def list(self) -> Sequence[DeliverySettingsValue]:
        return tuple(self._settings)

    def upsert(self, settings: DeliverySettingsValue) -> DeliverySettingsValue:
        if self._settings:
            self._settings[0] = settings
        else:
            self._settings.append(settings)
        return settings

    def get_active_settings(self) -> DeliverySettingsValue | None:
        return _first_settings(self._settings, "memory")

"""Store models: reference data for delivery pricing and the order record."""

from decimal import Decimal

from django.conf import settings
from django.db import models

from .pricing.types import DeliverySettings as DeliverySettingsValue
from .pricing.types import ShopLocation as ShopLocationValue
from .pricing.types import CartLine, ShoppingListOrder


class ShopLocation(models.Model):
    """A shop deliveries leave from and customers can pick up at."""

    name = models.CharField(max_length=200)
    address = models.CharField(max_length=500, blank=True)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "pk"]

    def __str__(self):
        return self.name

    def to_value(self) -> ShopLocationValue:
        return ShopLocationValue(
            id=self.pk,
            name=self.name,
            address=self.address,
            latitude=self.latitude,
            longitude=self.longitude,
            is_active=self.is_active,
        )


class DeliverySettings(models.Model):
    """Distance-based delivery pricing. One effective row is expected."""

    free_delivery_radius_km = models.DecimalField(
        max_digits=8, decimal_places=2, default=Decimal("10")
    )
    min_order_for_free_delivery = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("500")
    )
    base_delivery_fee = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("50"))
    per_km_charge = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("10"))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at", "pk"]
        verbose_name_plural = "delivery settings"

    def __str__(self):
        return (
            f"Free within {self.free_delivery_radius_km} km "
            f"over Rs. {self.min_order_for_free_delivery}"
        )

    def to_value(self) -> DeliverySettingsValue:
        """Validated value object; raises ConfigurationError on bad data."""
        return DeliverySettingsValue(
            free_delivery_radius_km=self.free_delivery_radius_km,
            min_order_for_free_delivery=self.min_order_for_free_delivery,
            base_delivery_fee=self.base_delivery_fee,
            per_km_charge=self.per_km_charge,
        )


class ShoppingList(models.Model):
    """A customer's free-form shopping list, priced by an admin."""

    class Status(models.TextChoices):
        SUBMITTED = "submitted", "Submitted"
        PRICED = "priced", "Priced"
        PAID = "paid", "Paid"
        CANCELLED = "cancelled", "Cancelled"

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="shopping_lists",
    )
    list_text = models.TextField(blank=True)
    items = models.JSONField(default=list, blank=True)
    estimated_total = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    admin_notes = models.TextField(blank=True)
    customer_contact = models.CharField(max_length=200, blank=True)
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.SUBMITTED)
    order = models.OneToOneField(
        "store.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="shopping_list",
    )
    delivery_method = models.CharField(max_length=16, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Shopping list #{self.pk} ({self.status})"

    def to_value(self) -> ShoppingListOrder:
        return ShoppingListOrder(
            list_id=self.pk,
            estimated_total=self.estimated_total,
            list_items=[CartLine.from_record(item) for item in self.items or []],
            admin_notes=self.admin_notes,
            customer_contact=self.customer_contact,
        )


class Order(models.Model):
    """A placed order. Total fields are written once at creation."""

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        PROCESSING = "processing", "Processing"
        COMPLETED = "completed", "Completed"
        REFUNDED = "refunded", "Refunded"
        CANCELLED = "cancelled", "Cancelled"

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", "Pending"
        PROCESSING = "processing", "Processing"
        COMPLETED = "completed", "Completed"
        FAILED = "failed", "Failed"

    order_number = models.CharField(max_length=32, unique=True)
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    items = models.JSONField(default=list)
    delivery_method = models.CharField(max_length=16)
    payment_method = models.CharField(max_length=16)
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING)
    payment_status = models.CharField(
        max_length=16, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )
    is_international_order = models.BooleanField(default=False)
    is_gift = models.BooleanField(default=False)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)

    # Totals (from pricing.calculators.OrderTotals)
    shopping_list_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    business_discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    delivery_fee = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    total_amount_usd = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    delivery_rule = models.CharField(max_length=16, blank=True)
    nearest_shop = models.ForeignKey(
        ShopLocation,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    nearest_distance_km = models.DecimalField(max_digits=9, decimal_places=3, null=True, blank=True)

    replacement_mappings = models.JSONField(null=True, blank=True)
    has_replacements = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.order_number


class CreditOrder(models.Model):
    """Amount a business customer owes for an order paid on credit."""

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", "Pending"
        PAID = "paid", "Paid"

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="credit_orders",
    )
    order = models.OneToOneField(Order, on_delete=models.CASCADE, related_name="credit_order")
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    payment_status = models.CharField(
        max_length=16, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )
    due_date = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Credit for {self.order.order_number}"


class ReplacementEvent(models.Model):
    """Admin decision on a customer-selected replacement.

    Recorded next to the order; the order totals themselves are never
    rewritten.
    """

    class Status(models.TextChoices):
        APPROVED = "approved", "Approved by admin"
        REJECTED = "rejected", "Rejected"

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="replacement_events")
    original_product_id = models.CharField(max_length=64)
    replacement_product_id = models.CharField(max_length=64)
    replacement_product_name = models.CharField(max_length=200, blank=True)
    price_delta = models.DecimalField(max_digits=12, decimal_places=2)
    classification = models.CharField(max_length=8)
    status = models.CharField(max_length=16, choices=Status.choices)
    decided_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "pk"]

    def __str__(self):
        return f"{self.order.order_number}: {self.original_product_id} -> {self.replacement_product_id}"

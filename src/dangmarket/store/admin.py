from django.contrib import admin

from .models import CreditOrder, DeliverySettings, Order, ReplacementEvent, ShopLocation, ShoppingList


@admin.register(ShopLocation)
class ShopLocationAdmin(admin.ModelAdmin):
    list_display = ("name", "address", "latitude", "longitude", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name", "address")


@admin.register(DeliverySettings)
class DeliverySettingsAdmin(admin.ModelAdmin):
    list_display = (
        "free_delivery_radius_km",
        "min_order_for_free_delivery",
        "base_delivery_fee",
        "per_km_charge",
        "updated_at",
    )


@admin.register(ShoppingList)
class ShoppingListAdmin(admin.ModelAdmin):
    list_display = ("pk", "customer", "status", "estimated_total", "created_at")
    list_filter = ("status",)
    raw_id_fields = ("customer", "order")


class ReplacementEventInline(admin.TabularInline):
    model = ReplacementEvent
    extra = 0
    readonly_fields = (
        "original_product_id",
        "replacement_product_id",
        "replacement_product_name",
        "price_delta",
        "classification",
        "status",
        "decided_by",
        "created_at",
    )
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "order_number",
        "customer",
        "total_amount",
        "delivery_fee",
        "payment_method",
        "payment_status",
        "status",
        "created_at",
    )
    list_filter = ("status", "payment_status", "payment_method", "delivery_method")
    search_fields = ("order_number", "customer__email")
    raw_id_fields = ("customer", "nearest_shop")
    inlines = [ReplacementEventInline]
    # Totals are written once at checkout
    readonly_fields = (
        "shopping_list_total",
        "subtotal",
        "business_discount",
        "delivery_fee",
        "total_amount",
        "total_amount_usd",
        "delivery_rule",
        "nearest_distance_km",
    )


@admin.register(CreditOrder)
class CreditOrderAdmin(admin.ModelAdmin):
    list_display = ("order", "customer", "amount", "payment_status", "due_date")
    list_filter = ("payment_status",)
    raw_id_fields = ("customer", "order")

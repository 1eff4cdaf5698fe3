"""URL configuration for the Dang Market storefront."""

from django.contrib import admin
from django.urls import path

from dangmarket.core.views import health_check

urlpatterns = [
    # Health check
    path("health/", health_check, name="health_check"),

    # Django admin (shops, delivery settings, orders)
    path("admin/", admin.site.urls),
]

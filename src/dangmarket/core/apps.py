"""Core app configuration."""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Configuration for the core application."""

    name = "dangmarket.core"
    verbose_name = "Dang Market Core"
    default_auto_field = "django.db.models.BigAutoField"

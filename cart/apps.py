"""Django app configuration for the Cart app."""

from django.apps import AppConfig


class CartConfig(AppConfig):
    """AppConfig for the cart ledger."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "cart"

    def ready(self):
        from . import signals  # noqa: F401

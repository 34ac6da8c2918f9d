"""Django app configuration for the users app."""

from django.apps import AppConfig


class UsersConfig(AppConfig):
    """Owns the custom user model referenced by AUTH_USER_MODEL."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "users"

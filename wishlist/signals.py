"""Create an empty wishlist alongside every new user."""

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Wishlist


@receiver(post_save, sender=settings.AUTH_USER_MODEL, dispatch_uid="wishlist_create_for_user")
def create_wishlist_for_user(sender, instance, created, raw=False, **kwargs):
    if created and not raw:
        Wishlist.objects.get_or_create(user=instance)

import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Wishlist",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="wishlist",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-updated_at"],
            },
        ),
        migrations.CreateModel(
            name="WishlistItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("entry_id", models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                ("product_ref", models.CharField(max_length=128)),
                (
                    "source",
                    models.CharField(
                        choices=[("catalog", "Catalog"), ("inline", "Inline")], default="catalog", max_length=16
                    ),
                ),
                ("name", models.CharField(max_length=200)),
                ("price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("original_price", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("image", models.CharField(blank=True, max_length=500)),
                ("category", models.CharField(blank=True, max_length=120)),
                ("brand", models.CharField(blank=True, max_length=120)),
                ("added_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "wishlist",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="items", to="wishlist.wishlist"
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.UniqueConstraint(fields=("wishlist", "product_ref"), name="unique_product_ref_per_wishlist"),
                    models.CheckConstraint(
                        condition=models.Q(("price__gte", 0)), name="wishlist_item_price_non_negative"
                    ),
                ],
            },
        ),
    ]

import logging

from django.core.management.base import BaseCommand
from django.utils import timezone
from orders.models import IdempotencyKey

logger = logging.getLogger("storefront.orders")


class Command(BaseCommand):
    help = "Delete order idempotency records whose replay window has passed"

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="Only report how many records would be deleted")

    def handle(self, *args, **options):
        qs = IdempotencyKey.objects.filter(expires_at__lte=timezone.now())
        count = qs.count()
        if options["dry_run"]:
            self.stdout.write(f"{count} expired idempotency keys would be deleted.")
            return
        qs.delete()
        logger.info("orders.idempotency_cleanup", extra={"event": "orders.idempotency_cleanup", "deleted": count})
        self.stdout.write(self.style.SUCCESS(f"Deleted {count} expired idempotency keys."))

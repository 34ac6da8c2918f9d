from cart.models import CartMergeReceipt
from django.core.management.base import BaseCommand
from django.utils import timezone


class Command(BaseCommand):
    help = "Delete cart merge receipts whose replay window has passed"

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="Only report how many receipts would be deleted")

    def handle(self, *args, **options):
        qs = CartMergeReceipt.objects.filter(expires_at__lte=timezone.now())
        count = qs.count()
        if options["dry_run"]:
            self.stdout.write(f"{count} expired merge receipts would be deleted.")
            return
        qs.delete()
        self.stdout.write(self.style.SUCCESS(f"Deleted {count} expired merge receipts."))

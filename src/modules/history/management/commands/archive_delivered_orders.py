from __future__ import annotations

from django.core.management.base import BaseCommand

from modules.history.archive import OrderArchive


class Command(BaseCommand):
    help = "Move every live Delivered order into the order history."

    def handle(self, *args, **options):
        result = OrderArchive().bulk_archive()

        for order_id in result.failed:
            self.stderr.write(f"Failed to archive order {order_id}")

        style = self.style.SUCCESS if not result.failed else self.style.WARNING
        self.stdout.write(
            style(f"Archived {result.archived_count} order(s), {result.failed_count} failed.")
        )

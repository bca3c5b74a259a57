from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from products.models import Product

CATALOG = [
    ("REC-0001", "Kind of Blue", "29.99", 25),
    ("REC-0002", "Abbey Road", "29.99", 40),
    ("REC-0003", "Rumours", "24.50", 15),
    ("REC-0004", "Blue Train", "27.00", 10),
    ("REC-0005", "Nevermind", "22.00", 30),
]


class Command(BaseCommand):
    help = "Seed a small catalog with opening stock (idempotent)"

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding products..."))

        created_count = 0
        for sku, title, price, stock in CATALOG:
            _, created = Product.objects.get_or_create(
                sku=sku,
                defaults={
                    "title": title,
                    "price": Decimal(price),
                    "stock": stock,
                },
            )
            created_count += int(created)

        self.stdout.write(
            self.style.SUCCESS(
                f"Products seeded: {created_count} created, "
                f"{len(CATALOG) - created_count} already present."
            )
        )

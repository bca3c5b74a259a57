# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class Product(models.Model):
    """
    Represents a sellable catalog product.

    STOCK MODEL (IMPORTANT):
    - `stock` is the single source of truth for availability.
    - It is mutated ONLY by products.services.inventory (reserve/release),
      never by save() from application memory.
    - stock >= 0 is enforced by a DB check constraint as well as by the
      conditional update in reserve_stock().

    `price` is the live catalog price. Carts and orders keep their own copy.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sku = models.CharField(max_length=128, unique=True, db_index=True)
    title = models.CharField(max_length=255, db_index=True)
    image_url = models.CharField(max_length=500, blank=True, default="")

    price = models.DecimalField(max_digits=10, decimal_places=2)

    stock = models.PositiveIntegerField(default=0)

    discontinued = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["title"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="product_stock_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="product_price_non_negative",
            ),
        ]

    def clean(self):
        if self.price is not None and Decimal(self.price) < Decimal("0.00"):
            raise ValidationError({"price": "Price cannot be negative"})

    def __str__(self):
        return f"{self.title} ({self.sku})"

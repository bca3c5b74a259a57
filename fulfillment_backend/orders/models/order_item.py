# orders/models/order_item.py

"""
ORDER ITEM (IMMUTABLE SNAPSHOT)

Copied from a cart line at conversion time: product, amount, captured price
and display fields, plus the line's position in the cart. Later catalog
changes never alter it.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from products.models import Product

from .order import Order


class OrderItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="order_items",
    )

    position = models.PositiveIntegerField(
        default=0,
        help_text="Index of the line in the cart it was converted from",
    )

    amount = models.PositiveIntegerField()

    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Captured price the buyer was charged",
    )

    title = models.CharField(max_length=255, blank=True, default="")
    image_url = models.CharField(max_length=500, blank=True, default="")

    class Meta:
        ordering = ["position", "id"]

    def clean(self):
        if self.amount is None or int(self.amount) <= 0:
            raise ValidationError({"amount": "Amount must be greater than zero"})

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Order items are immutable once written.")
        self.full_clean(validate_unique=False)
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Order items are immutable and cannot be deleted.")

    @property
    def line_total(self) -> Decimal:
        return Decimal(self.price) * Decimal(int(self.amount))

    def __str__(self):
        return f"{self.title or 'Product'} x {self.amount}"

# carts/models/cart_item.py

"""
CART ITEM MODEL

Purpose:
- Store cart line items.
- `price` is the CAPTURED price (contract price), refreshed from the product
  on every add of the same product.
- title/image_url are denormalized display fields captured with the price.

Rules:
- One line per product per cart (DB constraint).
- Amount must be > 0.
"""

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from products.models import Product
from .cart import Cart


class CartItem(models.Model):
    """
    Individual line item in a cart.

    RULES:
    - Created ONLY via carts.services.cart_service
    - One product per cart
    - Backed by an equal stock reservation in the inventory ledger
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    cart = models.ForeignKey(
        Cart,
        on_delete=models.CASCADE,
        related_name="items",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="cart_items",
    )

    amount = models.PositiveIntegerField(help_text="Must be greater than zero")

    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Captured price at time of add (server-controlled)",
    )

    title = models.CharField(max_length=255, blank=True, default="")
    image_url = models.CharField(max_length=500, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["cart", "product"],
                name="unique_product_per_cart",
            )
        ]

    MAX_AMOUNT = 2147483647

    def clean(self):
        if self.amount is None or int(self.amount) <= 0:
            raise ValidationError({"amount": "Amount must be greater than zero"})

        if self.price is None or Decimal(self.price) < Decimal("0.00"):
            raise ValidationError({"price": "Price cannot be negative"})

    def save(self, *args, **kwargs):
        self.full_clean(validate_unique=False, validate_constraints=False)
        return super().save(*args, **kwargs)

    @property
    def line_total(self) -> Decimal:
        return (Decimal(self.price) if self.price is not None else Decimal("0.00")) * Decimal(
            int(self.amount or 0)
        )

    def __str__(self):
        return f"{self.title or 'Product'} x {self.amount}"

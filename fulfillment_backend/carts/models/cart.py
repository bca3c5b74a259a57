"""
PATH: carts/models/cart.py

CART MODEL

Purpose:
- A buyer's shopping cart (mutable while enabled).
- total_price is stored, but ALWAYS recomputed from the items after a mutation
  (recalculate_total), never incrementally patched.

Rules:
- At most one enabled cart per user (DB constraint).
- A disabled cart is reactivated (items cleared) instead of issuing a new
  cart id, so a user's cart id stays stable (see carts/services/cart_lifecycle.py).
- Cart rows are mutated only through carts/services/cart_service.py, which
  holds a row lock for the whole read-modify-write.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Sum

User = settings.AUTH_USER_MODEL

TWOPLACES = Decimal("0.01")

TOTAL_MAX_DIGITS = 12
MAX_TOTAL_PRICE = Decimal(10 ** (TOTAL_MAX_DIGITS - 2)) - TWOPLACES


class Cart(models.Model):
    """
    Shopping cart (one enabled cart per user).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="carts",
    )

    enabled = models.BooleanField(default=True)

    contact_email = models.EmailField(
        blank=True,
        default="",
        help_text="Contact email captured when items were first added (informational).",
    )

    total_price = models.DecimalField(
        max_digits=TOTAL_MAX_DIGITS,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Always equal to sum(item.amount * item.price).",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-updated_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user"],
                condition=models.Q(enabled=True),
                name="one_enabled_cart_per_user",
            )
        ]

    def clean(self):
        if self.user_id is None:
            raise ValidationError({"user": "user is required"})

    def save(self, *args, **kwargs):
        self.full_clean(validate_constraints=False)
        return super().save(*args, **kwargs)

    def compute_total(self) -> Decimal:
        # Decimal in Python; SQLite would sum these as floats.
        total = Decimal("0.00")
        for amount, price in self.items.values_list("amount", "price"):
            total += Decimal(int(amount)) * Decimal(price)
        return total.quantize(TWOPLACES)

    def recalculate_total(self) -> Decimal:
        self.total_price = self.compute_total()
        return self.total_price

    @property
    def item_count(self) -> int:
        total = self.items.aggregate(total=Sum("amount")).get("total")
        return int(total or 0)

    def __str__(self):
        status = "ENABLED" if self.enabled else "DISABLED"
        return f"Cart {self.id} | {self.user} | {status}"

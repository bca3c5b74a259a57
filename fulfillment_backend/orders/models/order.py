# orders/models/order.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL


def default_payment_method() -> str:
    return getattr(settings, "DEFAULT_PAYMENT_METHOD", "Credit Card")


class Order(models.Model):
    """
    A placed order: the frozen outcome of a cart conversion.

    GUARANTEES:
    - Immutable once written (save() on a persisted row and delete() raise)
    - Created ONLY via orders.services.order_converter
    - Stock was already taken when the items entered the cart; an order
      never touches the ledger
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order_no = models.CharField(
        max_length=64,
        unique=True,
        blank=True,
        help_text="System-generated order number",
    )

    user = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name="orders",
    )

    user_email = models.EmailField(help_text="Buyer email at time of order")

    total = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    payment_method = models.CharField(
        max_length=64,
        default=default_payment_method,
        help_text="Opaque payment label (no payment processing here)",
    )

    order_date = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-order_date"]
        indexes = [
            models.Index(fields=["order_date"], name="order_date_idx"),
            models.Index(fields=["user_email"], name="order_user_email_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError(f"Order {self.order_no} is immutable once placed.")

        if not self.order_no:
            prefix = timezone.now().strftime("ORD%Y%m%d")
            self.order_no = f"{prefix}-{uuid.uuid4().hex[:8].upper()}"

        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError(f"Order {self.order_no} is immutable and cannot be deleted.")

    @property
    def item_count(self) -> int:
        return sum(int(i.amount) for i in self.items.all())

    def __str__(self):
        return f"{self.order_no} | {self.total}"

# orders/services/order_converter.py

"""
ORDER CONVERTER (APPLICATION SERVICE)

Purpose:
- Turn the user's active cart into an immutable Order (+ OrderItems).

Hard rules:
- Stock is NOT touched: the units were reserved when they entered the cart
  and now simply leave the system with the order.
- Order rows are written first; only then are the cart lines deleted, the
  total reset and the cart disabled. Both steps share one transaction, so a
  failure leaves the cart exactly as it was and no order exists.
- The cart row is locked (select_for_update) for the whole conversion, so a
  concurrent add/remove either lands before the snapshot or waits and then
  finds the cart disabled.
"""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import transaction

from carts.models import Cart
from carts.services.cart_lifecycle import STATE_DISABLED, validate_transition
from core.db import translate_storage_errors
from core.exceptions import (
    CartConflictError,
    EmptyCartError,
    InvalidArgumentError,
    NoActiveCartError,
    OrderNotFoundError,
)
from orders.models import Order, OrderItem
from users.models import normalize_identity_email
from users.services.lookup import resolve_user_by_email

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _normalize_payment_method(method: str | None) -> str:
    m = (method or "").strip()
    return m or settings.DEFAULT_PAYMENT_METHOD


def _resolve_order_email(*, user, user_email: str | None) -> str:
    email = normalize_identity_email(user_email) or normalize_identity_email(user.email)
    try:
        validate_email(email)
    except ValidationError as exc:
        raise InvalidArgumentError(f"Invalid order email: {email}", identifier=email) from exc
    return email


# ============================================================
# CONVERSION
# ============================================================

def convert_cart_to_order(*, user, user_email: str | None = None, payment_method: str | None = None) -> Order:
    """
    Snapshot the active cart into an Order, then empty and disable the cart.

    Raises:
    - NoActiveCartError: user has no enabled cart
    - EmptyCartError: the cart has no lines
    """
    email = _resolve_order_email(user=user, user_email=user_email)
    method = _normalize_payment_method(payment_method)

    with translate_storage_errors(identifier=user.pk, conflict_cls=CartConflictError):
        with transaction.atomic():
            cart = Cart.objects.select_for_update().filter(user=user, enabled=True).first()
            if cart is None:
                raise NoActiveCartError(
                    f"No active cart for user {user.pk}", identifier=user.pk
                )

            lines = list(cart.items.order_by("created_at", "id"))
            if not lines:
                raise EmptyCartError("Cannot place an order from an empty cart", identifier=cart.id)

            order = Order.objects.create(
                user=user,
                user_email=email,
                total=_money(cart.total_price),
                payment_method=method,
            )

            for position, line in enumerate(lines):
                OrderItem.objects.create(
                    order=order,
                    position=position,
                    product_id=line.product_id,
                    amount=line.amount,
                    price=line.price,
                    title=line.title,
                    image_url=line.image_url,
                )

            # Units leave with the order: delete lines without releasing stock.
            validate_transition(cart=cart, target_state=STATE_DISABLED)
            cart.items.all().delete()
            cart.total_price = Decimal("0.00")
            cart.enabled = False
            cart.save(update_fields=["total_price", "enabled", "updated_at"])

    logger.info(
        "Order placed",
        extra={
            "order_id": str(order.id),
            "order_no": order.order_no,
            "cart_id": str(cart.id),
            "lines": len(lines),
            "total": str(order.total),
        },
    )
    return order


# ============================================================
# READS
# ============================================================

def _order_qs():
    return Order.objects.select_related("user").prefetch_related("items")


def list_orders_for_user(*, user) -> list[Order]:
    return list(_order_qs().filter(user=user).order_by("-order_date"))


def list_all_orders():
    """QuerySet (not a list) so the API layer can filter and paginate it."""
    return _order_qs().order_by("-order_date")


def list_orders_for_email(*, email) -> list[Order]:
    user = resolve_user_by_email(email=email)
    return list_orders_for_user(user=user)


def get_order(*, order_id) -> Order:
    try:
        oid = uuid.UUID(str(order_id).strip())
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"Malformed order id: {order_id}", identifier=order_id) from exc

    order = _order_qs().filter(pk=oid).first()
    if order is None:
        raise OrderNotFoundError(f"Order {oid} not found", identifier=oid)
    return order

# carts/services/cart_service.py

"""
CART MANAGER (APPLICATION SERVICE)

Purpose:
- Own the lifecycle of a user's single active cart.
- Mutate line items and keep total_price == sum(amount * price).
- Delegate every stock change to the inventory ledger.

Concurrency:
- Every mutating operation runs in transaction.atomic() and locks the user's
  cart row with select_for_update(), so the read-modify-write of items and
  total is serialized per cart. Different users never contend.
- Lock order is always: cart row, then product rows (ledger UPDATEs).
  Multi-line releases visit products in product_id order.

Failure rules:
- Validation (amount, ids, line/total capacity, ExcessRemoval, ItemNotFound)
  happens before any stock or cart write.
- InsufficientStockError from the ledger aborts add_item() with the cart
  untouched.
- add_item(): if persisting the cart fails after the reservation, the
  reservation is released (compensation) before the error surfaces.
- remove_item(): if persisting the cart fails after the release, a
  CartReconciliationError is raised instead of a silent mismatch.
"""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import DatabaseError, IntegrityError, transaction

from carts.models import Cart, CartItem
from carts.models.cart import MAX_TOTAL_PRICE
from carts.services.cart_lifecycle import (
    STATE_ACTIVE,
    STATE_DISABLED,
    reactivated_fields,
    validate_transition,
)
from core.db import to_positive_amount, translate_storage_errors
from core.exceptions import (
    CartConflictError,
    CartItemNotFoundError,
    CartReconciliationError,
    ExcessRemovalError,
    FulfillmentError,
    InvalidArgumentError,
    NoActiveCartError,
    ProductNotFoundError,
    StorageUnavailableError,
)
from products.models import Product
from products.services.inventory import release_stock, reserve_stock
from users.services.lookup import get_user_by_email, resolve_user_by_email

logger = logging.getLogger(__name__)


# ============================================================
# HELPERS
# ============================================================

def _normalize_product_id(product_id) -> uuid.UUID:
    if isinstance(product_id, uuid.UUID):
        return product_id
    try:
        return uuid.UUID(str(product_id).strip())
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidArgumentError(
            f"Malformed product id: {product_id}", identifier=product_id
        ) from exc


def _normalize_contact_email(email) -> str:
    value = (email or "").strip().lower()
    if not value:
        return ""
    try:
        validate_email(value)
    except ValidationError as exc:
        raise InvalidArgumentError(
            f"Invalid contact email: {value}", identifier=value
        ) from exc
    return value


def _lock_active_cart(*, user) -> Cart | None:
    return Cart.objects.select_for_update().filter(user=user, enabled=True).first()


def _activate_cart(*, user) -> Cart:
    """
    NO_CART -> ACTIVE or DISABLED -> ACTIVE.

    Must run inside an atomic block; the returned cart row is locked.
    """
    disabled = (
        Cart.objects.select_for_update()
        .filter(user=user, enabled=False)
        .order_by("-updated_at")
        .first()
    )

    try:
        with transaction.atomic():
            if disabled is not None:
                validate_transition(cart=disabled, target_state=STATE_ACTIVE)
                # Disabled carts are emptied when disabled; this only drops stale rows.
                disabled.items.all().delete()
                for field, value in reactivated_fields().items():
                    setattr(disabled, field, value)
                disabled.save(update_fields=["enabled", "total_price", "updated_at"])
                cart, action = disabled, "reactivated"
            else:
                validate_transition(cart=None, target_state=STATE_ACTIVE)
                cart, action = Cart.objects.create(user=user), "created"
    except IntegrityError:
        # Lost the race to a concurrent activation for the same user.
        cart = _lock_active_cart(user=user)
        if cart is None:
            raise CartConflictError(
                "Concurrent cart activation; retry", identifier=user.pk
            )
        return cart

    logger.info(
        "Cart activated",
        extra={"cart_id": str(cart.id), "user_id": str(user.pk), "action": action},
    )
    return cart


def _lock_or_activate(*, user) -> Cart:
    return _lock_active_cart(user=user) or _activate_cart(user=user)


def _check_capacity(*, cart: Cart, product: Product, qty: int) -> None:
    """
    The line amount and the recomputed total after adding `qty` units at the
    current price must fit their columns. Checked before any stock moves.
    """
    held = 0
    total = Decimal("0.00")
    for line_pid, line_amount, line_price in cart.items.values_list("product_id", "amount", "price"):
        if line_pid == product.pk:
            held = int(line_amount)
        else:
            total += Decimal(int(line_amount)) * Decimal(line_price)

    new_amount = held + qty
    if new_amount > CartItem.MAX_AMOUNT:
        raise InvalidArgumentError(
            f"Cart line for product {product.pk} cannot exceed {CartItem.MAX_AMOUNT} units",
            identifier=product.pk,
        )

    total += Decimal(new_amount) * Decimal(product.price)
    if total > MAX_TOTAL_PRICE:
        raise InvalidArgumentError(
            f"Cart total would exceed {MAX_TOTAL_PRICE}", identifier=cart.id
        )


def _persist_total(cart: Cart, *extra_fields: str) -> None:
    cart.recalculate_total()
    cart.save(update_fields=["total_price", "updated_at", *extra_fields])


def _release_and_empty(cart: Cart) -> int:
    """
    Give every line's stock back to the ledger, then empty the cart.
    Returns the number of lines removed.
    """
    items = list(cart.items.order_by("product_id"))
    for item in items:
        release_stock(product_id=item.product_id, amount=item.amount)

    if items:
        cart.items.all().delete()
    _persist_total(cart)
    return len(items)


# ============================================================
# LIFECYCLE
# ============================================================

def get_or_create_cart(*, user) -> Cart:
    """
    Active cart if one exists; else reactivate the latest disabled cart
    (items cleared, total zero); else create a new one.
    """
    with translate_storage_errors(identifier=user.pk, conflict_cls=CartConflictError):
        with transaction.atomic():
            return _lock_or_activate(user=user)


def clear_cart(*, user) -> Cart:
    """
    Release stock for every line, empty the cart, reset the total.
    Idempotent: an empty cart is returned untouched.
    """
    with translate_storage_errors(identifier=user.pk, conflict_cls=CartConflictError):
        with transaction.atomic():
            cart = _lock_or_activate(user=user)
            if not cart.items.exists():
                return cart

            removed = _release_and_empty(cart)

    logger.info("Cart cleared", extra={"cart_id": str(cart.id), "lines": removed})
    return cart


def disable_cart(*, user) -> Cart:
    """
    clear_cart() followed by enabled=False.
    Raises NoActiveCartError when the user has no active cart.
    """
    with translate_storage_errors(identifier=user.pk, conflict_cls=CartConflictError):
        with transaction.atomic():
            cart = _lock_active_cart(user=user)
            if cart is None:
                raise NoActiveCartError(
                    f"No active cart for user {user.pk}", identifier=user.pk
                )

            validate_transition(cart=cart, target_state=STATE_DISABLED)
            removed = _release_and_empty(cart)

            cart.enabled = False
            cart.save(update_fields=["enabled", "updated_at"])

    logger.info("Cart disabled", extra={"cart_id": str(cart.id), "lines": removed})
    return cart


# ============================================================
# LINE ITEMS
# ============================================================

def _compensate_reservation(*, cart: Cart, product_id, amount: int, cause: Exception):
    try:
        release_stock(product_id=product_id, amount=amount)
    except FulfillmentError as release_exc:
        logger.exception(
            "Stock reservation could not be compensated",
            extra={"cart_id": str(cart.id), "product_id": str(product_id), "amount": amount},
        )
        raise CartReconciliationError(
            f"Cart {cart.id} was not saved and {amount} unit(s) of product {product_id} "
            "could not be returned to stock",
            identifier=product_id,
        ) from release_exc

    logger.warning(
        "Cart save failed; reservation released",
        extra={"cart_id": str(cart.id), "product_id": str(product_id), "amount": amount},
    )
    raise StorageUnavailableError(
        f"Cart {cart.id} could not be saved: {cause}", identifier=cart.id
    ) from cause


def add_item(*, user, product_id, amount, contact_email: str = "") -> Cart:
    """
    Reserve `amount` units of the product and add them to the user's cart.

    - Existing line: amount increases, captured price/title/image refreshed.
    - New line: appended with the product's current price/title/image.
    - total_price recomputed from all lines.
    """
    qty = to_positive_amount(amount)
    pid = _normalize_product_id(product_id)
    email = _normalize_contact_email(contact_email)

    with translate_storage_errors(identifier=pid, conflict_cls=CartConflictError):
        with transaction.atomic():
            product = Product.objects.filter(pk=pid).first()
            if product is None or product.discontinued:
                raise ProductNotFoundError(f"Product {pid} not found", identifier=pid)

            cart = _lock_or_activate(user=user)

            _check_capacity(cart=cart, product=product, qty=qty)

            # InsufficientStockError propagates here with nothing written.
            reserve_stock(product_id=pid, amount=qty)

            try:
                with transaction.atomic():
                    item = cart.items.filter(product_id=pid).first()
                    if item is not None:
                        item.amount = int(item.amount) + qty
                        item.price = product.price
                        item.title = product.title
                        item.image_url = product.image_url
                        item.save(update_fields=["amount", "price", "title", "image_url"])
                    else:
                        CartItem.objects.create(
                            cart=cart,
                            product=product,
                            amount=qty,
                            price=product.price,
                            title=product.title,
                            image_url=product.image_url,
                        )

                    extra = []
                    if email and not cart.contact_email:
                        cart.contact_email = email
                        extra.append("contact_email")
                    _persist_total(cart, *extra)
            except DatabaseError as exc:
                _compensate_reservation(cart=cart, product_id=pid, amount=qty, cause=exc)

    logger.info(
        "Cart item added",
        extra={"cart_id": str(cart.id), "product_id": str(pid), "amount": qty},
    )
    return cart


def remove_item(*, user, product_id, amount=None) -> Cart:
    """
    Remove `amount` units (or the whole line when amount is None) and give
    them back to stock.
    """
    qty = None if amount is None else to_positive_amount(amount)
    pid = _normalize_product_id(product_id)

    with translate_storage_errors(identifier=pid, conflict_cls=CartConflictError):
        with transaction.atomic():
            cart = _lock_active_cart(user=user)
            if cart is None:
                raise NoActiveCartError(
                    f"No active cart for user {user.pk}", identifier=user.pk
                )

            item = cart.items.filter(product_id=pid).first()
            if item is None:
                raise CartItemNotFoundError(
                    f"Product {pid} is not in the cart", identifier=pid
                )

            held = int(item.amount)
            removed = held if qty is None else qty
            if removed > held:
                raise ExcessRemovalError(
                    f"Cannot remove {removed} unit(s) of product {pid}; cart holds {held}",
                    identifier=pid,
                    held=held,
                    requested=removed,
                )

            release_stock(product_id=pid, amount=removed)

            try:
                with transaction.atomic():
                    if removed == held:
                        item.delete()
                    else:
                        item.amount = held - removed
                        item.save(update_fields=["amount"])
                    _persist_total(cart)
            except DatabaseError as exc:
                logger.exception(
                    "Cart save failed after stock release",
                    extra={"cart_id": str(cart.id), "product_id": str(pid), "amount": removed},
                )
                raise CartReconciliationError(
                    f"Stock for product {pid} was released but cart {cart.id} could not be saved",
                    identifier=pid,
                ) from exc

    logger.info(
        "Cart item removed",
        extra={"cart_id": str(cart.id), "product_id": str(pid), "amount": removed},
    )
    return cart


# ============================================================
# EMAIL-ADDRESSED VARIANTS
# ============================================================

def remove_item_by_email(*, email, product_id, amount=None) -> Cart:
    user = resolve_user_by_email(email=email)
    return remove_item(user=user, product_id=product_id, amount=amount)


def enable_cart_by_email(*, email) -> Cart:
    user = resolve_user_by_email(email=email)
    return get_or_create_cart(user=user)


def disable_cart_by_email(*, email) -> Cart:
    user = resolve_user_by_email(email=email)
    return disable_cart(user=user)


# ============================================================
# READ PROJECTIONS (no stock / captured-price mutation)
# ============================================================

def _read_qs():
    return Cart.objects.select_related("user").prefetch_related("items__product")


def get_cart_by_user(*, user) -> Cart | None:
    return _read_qs().filter(user=user, enabled=True).first()


def get_cart_by_email(*, email) -> Cart | None:
    user = get_user_by_email(email=email)
    if user is None:
        return None
    return get_cart_by_user(user=user)


def list_carts() -> list[Cart]:
    return list(_read_qs().filter(enabled=True).order_by("-updated_at"))

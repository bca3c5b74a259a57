# products/services/inventory.py

"""
======================================================
PATH: products/services/inventory.py
======================================================
INVENTORY LEDGER

Purpose:
- Reserve stock (decrement) to back a cart line item.
- Release stock (increment) when items leave a cart without becoming an order.

Rules:
- Quantities are integer units >= 1; anything else is InvalidArgumentError
  and nothing is written.
- reserve_stock() is ONE conditional UPDATE:
      UPDATE product SET stock = stock - n WHERE id = ? AND stock >= n
  Two concurrent reservations can never both pass the check against the same
  units; the database serializes them on the row.
- Never read-then-write stock from application memory.
- The post-update stock is read back inside the same transaction, while the
  row lock is still held, so the returned value is the one this call produced.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F

from core.db import to_positive_amount, translate_storage_errors
from core.exceptions import (
    InsufficientStockError,
    InvalidArgumentError,
    ProductNotFoundError,
)
from products.models import Product

logger = logging.getLogger(__name__)


def _product_qs(product_id):
    try:
        return Product.objects.filter(pk=product_id)
    except (ValueError, ValidationError) as exc:
        raise InvalidArgumentError(
            f"Malformed product id: {product_id}", identifier=product_id
        ) from exc


def _read_stock(qs) -> int | None:
    row = qs.values_list("stock", flat=True).first()
    return None if row is None else int(row)


def get_stock(*, product_id) -> int:
    qs = _product_qs(product_id)
    with translate_storage_errors(identifier=product_id):
        current = _read_stock(qs)
    if current is None:
        raise ProductNotFoundError(f"Product {product_id} not found", identifier=product_id)
    return current


def reserve_stock(*, product_id, amount) -> int:
    """
    Atomically decrement stock by `amount` only if enough is available.

    Returns the post-decrement stock.
    Raises InsufficientStockError (no mutation) or ProductNotFoundError.
    """
    qty = to_positive_amount(amount)
    qs = _product_qs(product_id)

    with translate_storage_errors(identifier=product_id), transaction.atomic():
        updated = qs.filter(stock__gte=qty).update(stock=F("stock") - qty)

        if updated:
            new_stock = _read_stock(qs)
            logger.info(
                "Stock reserved",
                extra={"product_id": str(product_id), "amount": qty, "stock": new_stock},
            )
            return new_stock

        available = _read_stock(qs)

    if available is None:
        raise ProductNotFoundError(f"Product {product_id} not found", identifier=product_id)

    logger.info(
        "Stock reservation refused",
        extra={"product_id": str(product_id), "amount": qty, "stock": available},
    )
    raise InsufficientStockError(
        f"Insufficient stock for product {product_id}. "
        f"Requested: {qty}, Available: {available}",
        identifier=product_id,
        requested=qty,
        available=available,
    )


def release_stock(*, product_id, amount) -> int:
    """
    Atomically increment stock by `amount`.

    Returns the post-increment stock.
    Raises ProductNotFoundError.
    """
    qty = to_positive_amount(amount)
    qs = _product_qs(product_id)

    with translate_storage_errors(identifier=product_id), transaction.atomic():
        updated = qs.update(stock=F("stock") + qty)
        if not updated:
            raise ProductNotFoundError(f"Product {product_id} not found", identifier=product_id)

        new_stock = _read_stock(qs)

    logger.info(
        "Stock released",
        extra={"product_id": str(product_id), "amount": qty, "stock": new_stock},
    )
    return new_stock

# core/exceptions.py

"""
FULFILLMENT ERRORS

Centralized domain errors shared by the inventory ledger, cart manager and
order converter.

Every error carries:
- code: stable machine-readable kind (used by the API layer)
- identifier: the offending id/email (may be None)
- retryable: True only for Conflict / StorageUnavailable

Rules:
- Validation errors are raised BEFORE any mutation.
- Nothing is downgraded to a success; the API layer maps these to responses.
"""

from __future__ import annotations


class FulfillmentError(Exception):
    """Base exception for all fulfillment core failures."""

    code = "FULFILLMENT_ERROR"
    retryable = False

    def __init__(self, message: str = "", *, identifier=None):
        super().__init__(message or self.code)
        self.identifier = None if identifier is None else str(identifier)

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else self.code

    def as_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "identifier": self.identifier,
        }


# ============================================================
# NOT FOUND
# ============================================================

class NotFoundError(FulfillmentError):
    code = "NOT_FOUND"


class ProductNotFoundError(NotFoundError):
    code = "PRODUCT_NOT_FOUND"


class CartItemNotFoundError(NotFoundError):
    code = "ITEM_NOT_FOUND"


class OrderNotFoundError(NotFoundError):
    code = "ORDER_NOT_FOUND"


class UserNotFoundError(NotFoundError):
    code = "USER_NOT_FOUND"


# ============================================================
# VALIDATION
# ============================================================

class InvalidArgumentError(FulfillmentError):
    code = "INVALID_ARGUMENT"


class InsufficientStockError(FulfillmentError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, message: str = "", *, identifier=None, requested=None, available=None):
        super().__init__(message, identifier=identifier)
        self.requested = requested
        self.available = available


class ExcessRemovalError(FulfillmentError):
    code = "EXCESS_REMOVAL"

    def __init__(self, message: str = "", *, identifier=None, held=None, requested=None):
        super().__init__(message, identifier=identifier)
        self.held = held
        self.requested = requested


class EmptyCartError(FulfillmentError):
    code = "EMPTY_CART"


class NoActiveCartError(FulfillmentError):
    code = "NO_ACTIVE_CART"


class InvalidCartTransitionError(FulfillmentError):
    code = "INVALID_CART_TRANSITION"


# ============================================================
# RETRYABLE
# ============================================================

class ConflictError(FulfillmentError):
    """A concurrent mutation invalidated an assumption. Caller may retry."""

    code = "CONFLICT"
    retryable = True


class CartConflictError(ConflictError):
    code = "CART_CONFLICT"


class CartReconciliationError(ConflictError):
    """Stock and cart may have diverged; raised instead of a silent loss."""

    code = "CART_RECONCILIATION_FAILED"


class StorageUnavailableError(FulfillmentError):
    """Transient persistence failure (timeout, lost connection)."""

    code = "STORAGE_UNAVAILABLE"
    retryable = True

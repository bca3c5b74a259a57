"""
CART LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions for a user's cart:

    NO_CART  -> ACTIVE      (create)
    DISABLED -> ACTIVE      (reactivate: items cleared, total reset, same id)
    ACTIVE   -> DISABLED    (disable: after clear, or after order conversion)

DESIGN PRINCIPLES:
- No database writes
- No stock mutation
- No side effects
"""

from __future__ import annotations

from decimal import Decimal

from core.exceptions import InvalidCartTransitionError

# ============================================================
# STATE DEFINITIONS
# ============================================================

STATE_NO_CART = "no_cart"
STATE_ACTIVE = "active"
STATE_DISABLED = "disabled"

ALLOWED_TRANSITIONS = {
    STATE_NO_CART: {STATE_ACTIVE},
    STATE_DISABLED: {STATE_ACTIVE},
    STATE_ACTIVE: {STATE_DISABLED},
}


# ============================================================
# DOMAIN RULES
# ============================================================


def cart_state(cart) -> str:
    if cart is None:
        return STATE_NO_CART
    return STATE_ACTIVE if cart.enabled else STATE_DISABLED


def can_transition(*, from_state: str, to_state: str) -> bool:
    return to_state in ALLOWED_TRANSITIONS.get(from_state, set())


def validate_transition(*, cart, target_state: str) -> None:
    current = cart_state(cart)
    if not can_transition(from_state=current, to_state=target_state):
        raise InvalidCartTransitionError(
            f"Cart cannot transition from '{current}' to '{target_state}'",
            identifier=getattr(cart, "id", None),
        )


def reactivated_fields() -> dict:
    """Field values a DISABLED cart takes when it becomes ACTIVE again."""
    return {"enabled": True, "total_price": Decimal("0.00")}

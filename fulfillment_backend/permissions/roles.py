# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission

from users.models import normalize_identity_email


# =========================================================
# ROLE CONSTANTS
# =========================================================
ROLE_ADMIN = "admin"
ROLE_CUSTOMER = "customer"


# =========================================================
# CAPABILITIES
# =========================================================
# Views protect capabilities, not raw roles.
CAP_CART_ANY = "carts.any"            # act on another user's cart by email
CAP_ORDER_VIEW_ALL = "orders.view_all"

ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {CAP_CART_ANY, CAP_ORDER_VIEW_ALL},
    ROLE_CUSTOMER: set(),  # own cart and orders only, via IsSelfOrAdmin
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    if getattr(user, "is_superuser", False):
        return ROLE_ADMIN
    return getattr(user, "role", None)


def capabilities_for(user) -> set[str]:
    return set(ROLE_CAPABILITIES.get(get_user_role(user), set()))


def can_act_for_email(user, email) -> bool:
    """
    True when `user` may act on the cart/orders addressed by `email`:
    their own address, or any address with CAP_CART_ANY.
    """
    if not user or not user.is_authenticated:
        return False
    if CAP_CART_ANY in capabilities_for(user):
        return True
    return normalize_identity_email(user.email) == normalize_identity_email(email)


# =========================================================
# Base Role Permission
# =========================================================
class BaseRolePermission(BasePermission):
    """
    Subclasses must define:
    - allowed_roles (set)
    """

    allowed_roles: set[str] = set()

    def has_permission(self, request, view):
        user = request.user

        if not user or not user.is_authenticated:
            return False

        user_role = get_user_role(user)
        if not user_role:
            return False

        return user_role in self.allowed_roles


class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        required_capability = CAP_ORDER_VIEW_ALL
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_capability", None)
        if not required:
            # deny-by-default
            return False

        return required in capabilities_for(user)


class IsSelfOrAdmin(BasePermission):
    """
    For routes addressed by `<email>`: the owner of that email, or an admin.
    """

    message = "You may only act on your own cart and orders."

    def has_permission(self, request, view):
        email = (getattr(view, "kwargs", None) or {}).get("email", "")
        return can_act_for_email(request.user, email)


class IsAdmin(BaseRolePermission):
    allowed_roles = {ROLE_ADMIN}

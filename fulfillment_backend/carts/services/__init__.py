from .cart_service import (
    add_item,
    clear_cart,
    disable_cart,
    disable_cart_by_email,
    enable_cart_by_email,
    get_cart_by_email,
    get_cart_by_user,
    get_or_create_cart,
    list_carts,
    remove_item,
    remove_item_by_email,
)

__all__ = [
    "add_item",
    "clear_cart",
    "disable_cart",
    "disable_cart_by_email",
    "enable_cart_by_email",
    "get_cart_by_email",
    "get_cart_by_user",
    "get_or_create_cart",
    "list_carts",
    "remove_item",
    "remove_item_by_email",
]

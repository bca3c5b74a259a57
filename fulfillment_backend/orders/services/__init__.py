from .order_converter import (
    convert_cart_to_order,
    get_order,
    list_all_orders,
    list_orders_for_email,
    list_orders_for_user,
)

__all__ = [
    "convert_cart_to_order",
    "get_order",
    "list_all_orders",
    "list_orders_for_email",
    "list_orders_for_user",
]

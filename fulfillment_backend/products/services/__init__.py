from .inventory import get_stock, release_stock, reserve_stock

__all__ = [
    "get_stock",
    "reserve_stock",
    "release_stock",
]

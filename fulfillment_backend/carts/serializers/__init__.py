from .cart import CartSerializer
from .cart_item import CartItemSerializer, ProductDetailsSerializer

__all__ = ["CartSerializer", "CartItemSerializer", "ProductDetailsSerializer"]

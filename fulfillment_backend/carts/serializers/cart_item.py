"""
PATH: carts/serializers/cart_item.py

CART ITEM SERIALIZER

Purpose:
- Serialize cart lines for display.
- `price` is the captured price the buyer is charged; `product_details`
  is the live catalog view of the same product (may differ).
"""

from rest_framework import serializers

from carts.models import CartItem
from products.models import Product


class ProductDetailsSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ["id", "sku", "title", "image_url", "price", "stock", "discontinued"]
        read_only_fields = fields


class CartItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(source="product.id", read_only=True)
    product_details = ProductDetailsSerializer(source="product", read_only=True)

    line_total = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        read_only=True,
    )

    class Meta:
        model = CartItem
        fields = [
            "id",
            "product_id",
            "title",
            "image_url",
            "amount",
            "price",
            "line_total",
            "product_details",
            "created_at",
        ]
        read_only_fields = fields

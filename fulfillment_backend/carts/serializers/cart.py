# carts/serializers/cart.py

"""
CART SERIALIZER

Purpose:
- Return a cart in a frontend-friendly shape.
- total_price is the stored, server-derived total (never trusted from client).
"""

from rest_framework import serializers

from carts.models import Cart
from .cart_item import CartItemSerializer


class CartSerializer(serializers.ModelSerializer):
    """
    Guarantees:
    - items are read-only
    - total_price == sum(item.amount * item.price)
    """

    user_id = serializers.UUIDField(source="user.id", read_only=True)
    user_email = serializers.EmailField(source="user.email", read_only=True)

    items = CartItemSerializer(many=True, read_only=True)

    item_count = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = Cart
        fields = [
            "id",
            "user_id",
            "user_email",
            "enabled",
            "contact_email",
            "items",
            "item_count",
            "total_price",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_item_count(self, obj) -> int:
        # Units across lines, not number of lines
        return sum(int(i.amount or 0) for i in obj.items.all())

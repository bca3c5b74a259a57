# orders/serializers/order.py

from rest_framework import serializers

from orders.models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    """
    Order line (read-only snapshot).
    Designed for receipts + UI display.
    """

    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product",
            "title",
            "image_url",
            "amount",
            "price",
            "line_total",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    user_id = serializers.UUIDField(source="user.id", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_no",
            "user_id",
            "user_email",
            "total",
            "payment_method",
            "order_date",
            "items",
        ]
        read_only_fields = fields


class CreateOrderInputSerializer(serializers.Serializer):
    # Defaults to settings.DEFAULT_PAYMENT_METHOD when blank
    payment_method = serializers.CharField(required=False, allow_blank=True, max_length=64, default="")

from .order import CreateOrderInputSerializer, OrderItemSerializer, OrderSerializer

__all__ = ["CreateOrderInputSerializer", "OrderItemSerializer", "OrderSerializer"]

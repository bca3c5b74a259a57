# orders/views/api.py

"""
ORDER API VIEWS

Purpose:
- Place an order from the addressed user's active cart (201).
- Order history: own orders, orders by email, all orders (admin).

Security:
- Email-addressed routes: owner of the email, or admin.
- Full listing requires orders.view_all.
"""

from __future__ import annotations

from rest_framework import generics, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import OpenApiExample, extend_schema

from orders.serializers import CreateOrderInputSerializer, OrderSerializer
from orders.services import (
    convert_cart_to_order,
    get_order,
    list_all_orders,
    list_orders_for_email,
    list_orders_for_user,
)
from permissions.roles import CAP_ORDER_VIEW_ALL, HasCapability, IsSelfOrAdmin, can_act_for_email
from users.services.lookup import resolve_user_by_email


class CreateOrderView(APIView):
    """
    POST /api/orders/create/<email>/

    GUARANTEES:
    - Atomic conversion (order written, cart emptied + disabled together)
    - No stock movement (units were reserved when added to the cart)
    """

    permission_classes = [IsAuthenticated, IsSelfOrAdmin]

    @extend_schema(
        request=CreateOrderInputSerializer,
        responses={201: OrderSerializer},
        description="Convert the user's active cart into an order",
        examples=[
            OpenApiExample(
                "Default payment method",
                value={},
                request_only=True,
            ),
            OpenApiExample(
                "Explicit payment method",
                value={"payment_method": "PayPal"},
                request_only=True,
            ),
        ],
    )
    def post(self, request, email):
        serializer = CreateOrderInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = resolve_user_by_email(email=email)
        order = convert_cart_to_order(
            user=user,
            user_email=user.email,
            payment_method=serializer.validated_data.get("payment_method") or None,
        )
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderListView(generics.ListAPIView):
    """
    All orders (admin). Filterable by payment_method and user_email; paginated.
    """

    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_ORDER_VIEW_ALL
    serializer_class = OrderSerializer
    filterset_fields = ["payment_method", "user_email"]

    def get_queryset(self):
        return list_all_orders()


class MyOrdersView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        responses={200: OrderSerializer(many=True)},
        description="Orders placed by the authenticated user, newest first",
    )
    def get(self, request):
        orders = list_orders_for_user(user=request.user)
        return Response(OrderSerializer(orders, many=True).data, status=status.HTTP_200_OK)


class OrdersByEmailView(APIView):
    permission_classes = [IsAuthenticated, IsSelfOrAdmin]

    @extend_schema(
        responses={200: OrderSerializer(many=True)},
        description="Orders of the user with this email, newest first",
    )
    def get(self, request, email):
        orders = list_orders_for_email(email=email)
        return Response(OrderSerializer(orders, many=True).data, status=status.HTTP_200_OK)


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        responses={200: OrderSerializer},
        description="Single order (owner or admin)",
    )
    def get(self, request, order_id):
        order = get_order(order_id=order_id)
        if not can_act_for_email(request.user, order.user.email):
            raise PermissionDenied("You may only view your own orders.")
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)

# carts/views/api.py

"""
CART API VIEWS

Purpose:
- Thin HTTP adapter over carts.services.cart_service.
- Email-addressed routes: the caller must own the email, or be an admin.

Hard rules:
- No cart/stock logic here; services own transactions and locking.
- Money is server-owned: prices are captured from Product on add.
- Domain errors are rendered by core.api.fulfillment_exception_handler.
"""

from __future__ import annotations

from rest_framework import serializers, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import OpenApiExample, extend_schema

from carts.serializers import CartSerializer
from carts.services import (
    add_item,
    clear_cart,
    disable_cart_by_email,
    enable_cart_by_email,
    get_cart_by_email,
    get_or_create_cart,
    list_carts,
    remove_item_by_email,
)
from core.exceptions import NoActiveCartError
from permissions.roles import IsAdmin, IsSelfOrAdmin
from users.services.lookup import resolve_user_by_email


# =====================================================
# SWAGGER INPUT SERIALIZERS
# =====================================================

class AddCartItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    amount = serializers.IntegerField(min_value=1)
    contact_email = serializers.EmailField(required=False, allow_blank=True, default="")


class RemoveCartItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    # Omitted: remove the whole line
    amount = serializers.IntegerField(min_value=1, required=False, allow_null=True, default=None)


# =====================================================
# CART API VIEWS
# =====================================================

class CartListView(APIView):
    """
    All enabled carts (admin only).
    """

    permission_classes = [IsAuthenticated, IsAdmin]
    serializer_class = CartSerializer

    @extend_schema(
        responses={200: CartSerializer(many=True)},
        description="List every enabled cart (admin only)",
    )
    def get(self, request):
        carts = list_carts()
        return Response(CartSerializer(carts, many=True).data, status=status.HTTP_200_OK)


class MyCartView(APIView):
    """
    Retrieve or create the authenticated user's active cart.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = CartSerializer

    @extend_schema(
        responses={200: CartSerializer},
        description="Get or create the active cart for the authenticated user",
    )
    def get(self, request):
        cart = get_or_create_cart(user=request.user)
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)


class CartByEmailView(APIView):
    permission_classes = [IsAuthenticated, IsSelfOrAdmin]
    serializer_class = CartSerializer

    @extend_schema(
        responses={200: CartSerializer},
        description="Active cart of the user with this email (404 when none)",
    )
    def get(self, request, email):
        cart = get_cart_by_email(email=email)
        if cart is None:
            raise NoActiveCartError(f"No active cart for {email}", identifier=email)
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)


class AddCartItemView(APIView):
    """
    Reserve stock and add a product to the addressed user's cart.

    Money rule:
    - Unit price is OWNED by Product and captured server-side.
    """

    permission_classes = [IsAuthenticated, IsSelfOrAdmin]
    serializer_class = CartSerializer

    @extend_schema(
        request=AddCartItemInputSerializer,
        responses={200: CartSerializer},
        description="Add a product to the cart (increments amount if the line exists)",
        examples=[
            OpenApiExample(
                "Add two units",
                value={
                    "product_id": "07d0722f-92fd-4a83-b84e-6e25f034a647",
                    "amount": 2,
                },
                request_only=True,
            ),
        ],
    )
    def post(self, request, email):
        serializer = AddCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = resolve_user_by_email(email=email)
        cart = add_item(
            user=user,
            product_id=serializer.validated_data["product_id"],
            amount=serializer.validated_data["amount"],
            contact_email=serializer.validated_data.get("contact_email") or "",
        )
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)


class RemoveCartItemView(APIView):
    permission_classes = [IsAuthenticated, IsSelfOrAdmin]
    serializer_class = CartSerializer

    @extend_schema(
        request=RemoveCartItemInputSerializer,
        responses={200: CartSerializer},
        description="Remove units of a product (or the whole line) and return them to stock",
    )
    def post(self, request, email):
        serializer = RemoveCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = remove_item_by_email(
            email=email,
            product_id=serializer.validated_data["product_id"],
            amount=serializer.validated_data.get("amount"),
        )
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)


class ClearCartView(APIView):
    """
    Empty the authenticated user's cart and return every unit to stock.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = CartSerializer

    @extend_schema(
        responses={200: CartSerializer},
        description="Clear active cart items (stock released)",
    )
    def delete(self, request):
        cart = clear_cart(user=request.user)
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)


class EnableCartView(APIView):
    permission_classes = [IsAuthenticated, IsSelfOrAdmin]
    serializer_class = CartSerializer

    @extend_schema(
        request=None,
        responses={200: CartSerializer},
        description="Ensure the user has an active cart (reactivates a disabled one)",
    )
    def post(self, request, email):
        cart = enable_cart_by_email(email=email)
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)


class DisableCartView(APIView):
    permission_classes = [IsAuthenticated, IsSelfOrAdmin]
    serializer_class = CartSerializer

    @extend_schema(
        request=None,
        responses={200: CartSerializer},
        description="Clear and disable the user's active cart",
    )
    def post(self, request, email):
        cart = disable_cart_by_email(email=email)
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)

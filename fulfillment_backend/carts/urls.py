"""
PATH: carts/urls.py

CART URLS

Purpose:
- Cart lifecycle (mine / enable / disable)
- Cart item operations (add / remove / clear)
- Admin listing
"""

from django.urls import path

from carts.views.api import (
    AddCartItemView,
    CartByEmailView,
    CartListView,
    ClearCartView,
    DisableCartView,
    EnableCartView,
    MyCartView,
    RemoveCartItemView,
)

app_name = "carts"

urlpatterns = [
    path("", CartListView.as_view(), name="list"),
    path("mine/", MyCartView.as_view(), name="mine"),
    path("clear/", ClearCartView.as_view(), name="clear"),

    path("add/<str:email>/", AddCartItemView.as_view(), name="add-item"),
    path("remove/<str:email>/", RemoveCartItemView.as_view(), name="remove-item"),
    path("enable/<str:email>/", EnableCartView.as_view(), name="enable"),
    path("disable/<str:email>/", DisableCartView.as_view(), name="disable"),

    # Catch-all last
    path("<str:email>/", CartByEmailView.as_view(), name="by-email"),
]

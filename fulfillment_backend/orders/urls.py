"""
PATH: orders/urls.py

ORDER URLS
"""

from django.urls import path

from orders.views.api import (
    CreateOrderView,
    MyOrdersView,
    OrderDetailView,
    OrderListView,
    OrdersByEmailView,
)

app_name = "orders"

urlpatterns = [
    path("", OrderListView.as_view(), name="list"),
    path("mine/", MyOrdersView.as_view(), name="mine"),
    path("create/<str:email>/", CreateOrderView.as_view(), name="create"),
    path("id/<uuid:order_id>/", OrderDetailView.as_view(), name="detail"),

    # Catch-all last
    path("<str:email>/", OrdersByEmailView.as_view(), name="by-email"),
]

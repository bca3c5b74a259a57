# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules (ledger-safe stock):

- Opening stock is set once, when the product is created.
- After that `stock` is read-only here: it moves only through
  products.services.inventory (reserve on add-to-cart, release on removal).
- Products are retired with `discontinued`, not deleted (carts and orders
  reference them with PROTECT).
"""

from __future__ import annotations

from django.contrib import admin

from products.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "sku",
        "title",
        "price",
        "stock",
        "discontinued",
        "updated_at",
    )
    list_filter = ("discontinued",)
    search_fields = ("sku", "title")
    ordering = ("title",)

    def get_readonly_fields(self, request, obj=None):
        base = ("created_at", "updated_at")
        if obj is None:
            return base
        return ("stock", *base)

    def has_delete_permission(self, request, obj=None):
        return False

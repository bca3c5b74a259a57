from django.contrib import admin

from .models import Cart, CartItem

# =====================================================
# CART ITEM INLINE (READ-ONLY)
# =====================================================


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    can_delete = False
    readonly_fields = (
        "product",
        "title",
        "amount",
        "price",
        "line_total",
        "created_at",
    )

    def has_add_permission(self, request, obj=None):
        return False


# =====================================================
# CART ADMIN
# =====================================================
# Carts hold stock reservations; edits here would bypass the ledger.


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "user",
        "enabled",
        "total_price",
        "item_count",
        "updated_at",
    )

    readonly_fields = (
        "id",
        "user",
        "enabled",
        "contact_email",
        "total_price",
        "item_count",
        "created_at",
        "updated_at",
    )

    search_fields = ("user__email", "contact_email")
    list_filter = ("enabled", "updated_at")

    inlines = [CartItemInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =====================================================
# CART ITEM ADMIN (FULLY IMMUTABLE)
# =====================================================


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "cart",
        "product",
        "amount",
        "price",
        "line_total",
        "created_at",
    )

    readonly_fields = (
        "id",
        "cart",
        "product",
        "title",
        "image_url",
        "amount",
        "price",
        "line_total",
        "created_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

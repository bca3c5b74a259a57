from django.contrib import admin

from .models import Order, OrderItem

# =====================================================
# ORDER ITEM INLINE (READ-ONLY)
# =====================================================


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = (
        "product",
        "title",
        "amount",
        "price",
        "line_total",
    )

    def has_add_permission(self, request, obj=None):
        return False


# =====================================================
# ORDER ADMIN (IMMUTABLE)
# =====================================================


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "order_no",
        "user_email",
        "total",
        "payment_method",
        "order_date",
    )

    readonly_fields = (
        "id",
        "order_no",
        "user",
        "user_email",
        "total",
        "payment_method",
        "order_date",
        "created_at",
    )

    search_fields = ("order_no", "user_email")
    list_filter = ("payment_method", "order_date")
    date_hierarchy = "order_date"

    inlines = [OrderItemInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

from django.conf import settings
from django.contrib import admin

from payments.money import format_amount
from .models import Order, OrderItem, OrderItemAddOn, Table


class OrderItemAddOnInline(admin.TabularInline):
    model = OrderItemAddOn
    extra = 0
    readonly_fields = ("add_on", "extra_price")
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("product", "quantity", "unit_price", "note")
    fields = ("product", "quantity", "unit_price", "note")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    list_display = ("number", "status", "server", "updated_at")
    list_filter = ("status",)
    ordering = ("number",)


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Orders are edited through the API; the admin is for inspection.
    """

    list_display = (
        "number",
        "table",
        "server",
        "status",
        "get_total_formatted",
        "created_at",
    )
    list_display_links = ("number",)
    list_filter = ("status", "created_at", "server")
    search_fields = ("number", "table__number", "server__username")
    inlines = [OrderItemInline]

    fieldsets = (
        ("Order Overview", {"fields": ("number", "table", "server", "status")}),
        (
            "Totals",
            {
                "fields": ("service_percentage", "subtotal", "service_charge", "total"),
                "description": "Stored totals as of the last recalculation.",
            },
        ),
        (
            "Timestamps",
            {
                "classes": ("collapse",),
                "fields": ("created_at", "updated_at", "sent_at", "closed_at"),
            },
        ),
    )
    readonly_fields = (
        "number",
        "subtotal",
        "service_charge",
        "total",
        "created_at",
        "updated_at",
        "sent_at",
        "closed_at",
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("table", "server")

    @admin.display(ordering="total", description="Total")
    def get_total_formatted(self, obj):
        return format_amount(getattr(settings, "CURRENCY", "CLP"), obj.total)


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ("id", "get_order_number", "product", "quantity", "unit_price", "note")
    search_fields = ("order__number", "product__name", "note")
    raw_id_fields = ("order",)
    inlines = [OrderItemAddOnInline]
    ordering = ("-order__created_at", "-id")
    list_per_page = 50

    @admin.display(ordering="order__number", description="Order Number")
    def get_order_number(self, obj):
        return obj.order.number

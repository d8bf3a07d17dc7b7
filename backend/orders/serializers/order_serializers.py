from rest_framework import serializers

from orders.grouping import DisplayGroup, group_line_items
from orders.models import Order, Table
from orders.services.calculation_service import OrderCalculationService
from orders.store import OrderStore


class TableSerializer(serializers.ModelSerializer):
    server_name = serializers.SerializerMethodField()

    class Meta:
        model = Table
        fields = ["id", "number", "status", "server", "server_name"]
        read_only_fields = fields

    def get_server_name(self, obj):
        return obj.server.display_name if obj.server else ""


class OrderSerializer(serializers.ModelSerializer):
    table_number = serializers.IntegerField(source="table.number", read_only=True)
    server_name = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "number",
            "table",
            "table_number",
            "server",
            "server_name",
            "status",
            "service_percentage",
            "subtotal",
            "service_charge",
            "total",
            "created_at",
            "sent_at",
            "closed_at",
        ]
        read_only_fields = fields

    def get_server_name(self, obj):
        return obj.server.display_name if obj.server else ""


class DisplayGroupSerializer(serializers.Serializer):
    """Read-only view of a ``DisplayGroup``"""

    product_id = serializers.IntegerField()
    product_name = serializers.CharField()
    quantity = serializers.IntegerField()
    item_ids = serializers.ListField(child=serializers.IntegerField())
    add_ons = serializers.SerializerMethodField()
    note = serializers.CharField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=0)

    def get_add_ons(self, obj: DisplayGroup):
        return [
            {"id": a.add_on_id, "name": a.name, "extra_price": str(a.extra_price)}
            for a in obj.add_ons
        ]


class ServicePercentageSerializer(serializers.Serializer):
    # Range checking is left to validate_percentage so the API and the
    # bill reprint report the same message
    service_percentage = serializers.JSONField()


def serialize_order_detail(order_id) -> dict:
    """
    Header, display groups and freshly computed totals of an order.
    Totals are recomputed (and persisted) for active orders; terminal orders
    report what was stored when they were closed.
    """
    order = OrderStore.get_order(order_id)
    if order.is_active:
        totals = OrderCalculationService.recalculate_order_totals(order.pk).to_dict()
        order = OrderStore.get_order(order.pk)
    else:
        totals = None

    data = OrderSerializer(order).data
    data["groups"] = DisplayGroupSerializer(
        group_line_items(OrderStore.list_line_items(order.pk)), many=True
    ).data
    if totals is None:
        totals = {
            "subtotal": str(order.subtotal),
            "service_percentage": format(order.service_percentage.normalize(), "f")
            if order.service_percentage is not None else None,
            "service_charge": str(order.service_charge),
            "total": str(order.total),
        }
    data["totals"] = totals
    return data

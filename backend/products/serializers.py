from rest_framework import serializers

from settings.services import channel_for_zone

from .models import AddOn, Product


class AddOnSerializer(serializers.ModelSerializer):
    class Meta:
        model = AddOn
        fields = ["id", "name", "extra_price"]
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source="category.name", default="", read_only=True)
    channel = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = ["id", "name", "price", "category", "category_name", "channel"]
        read_only_fields = fields

    def get_channel(self, obj):
        """Ticket channel the product's items are routed to."""
        zone = obj.category.kitchen_zone if obj.category else None
        return channel_for_zone(zone)

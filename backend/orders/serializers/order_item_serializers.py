from rest_framework import serializers


class AddItemSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    add_on_ids = serializers.ListField(
        child=serializers.IntegerField(), required=False, default=list
    )
    note = serializers.CharField(required=False, allow_blank=True, default="")


class UpdateQuantitySerializer(serializers.Serializer):
    INCREMENT = "inc"
    DECREMENT = "dec"

    op = serializers.ChoiceField(choices=[INCREMENT, DECREMENT])


class AttachAddOnSerializer(serializers.Serializer):
    add_on_id = serializers.IntegerField()


class ItemNoteSerializer(serializers.Serializer):
    # Longer notes are cut by the store, not rejected
    note = serializers.CharField(allow_blank=True, trim_whitespace=False)


class GroupSerializer(serializers.Serializer):
    """Identifies a display group by the ids of its line items"""

    item_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)


class GroupNoteSerializer(GroupSerializer):
    note = serializers.CharField(allow_blank=True, trim_whitespace=False)

"""
Orders serializers package - request validation and response shapes.
"""

from .order_item_serializers import (
    AddItemSerializer,
    AttachAddOnSerializer,
    GroupNoteSerializer,
    GroupSerializer,
    ItemNoteSerializer,
    UpdateQuantitySerializer,
)
from .order_serializers import (
    DisplayGroupSerializer,
    OrderSerializer,
    ServicePercentageSerializer,
    TableSerializer,
    serialize_order_detail,
)

__all__ = [
    # Order items
    'AddItemSerializer',
    'AttachAddOnSerializer',
    'GroupNoteSerializer',
    'GroupSerializer',
    'ItemNoteSerializer',
    'UpdateQuantitySerializer',
    # Orders
    'DisplayGroupSerializer',
    'OrderSerializer',
    'ServicePercentageSerializer',
    'TableSerializer',
    'serialize_order_detail',
]

"""
Orders views package.
"""

from .item_viewset import OrderItemViewSet
from .order_viewset import OrderViewSet
from .table_viewset import TableViewSet

__all__ = [
    'OrderItemViewSet',
    'OrderViewSet',
    'TableViewSet',
]

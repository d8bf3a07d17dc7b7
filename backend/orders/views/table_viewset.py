from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.models import Table
from orders.serializers import TableSerializer, serialize_order_detail
from orders.services import OrderService


class TableViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = Table.objects.select_related("server")
    lookup_value_regex = r"\d+"
    serializer_class = TableSerializer

    @action(detail=True, methods=["post"], url_path="claim")
    def claim(self, request: Request, pk=None) -> Response:
        """
        Take the table for the requesting user.

        Returns:
        - 201: A new order was opened
        - 200: The table already had an active order, which is returned
        - 409: Another server claimed the table first
        """
        result = OrderService.claim_table(pk, request.user)
        return Response(
            serialize_order_detail(result.order.pk),
            status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK,
        )

    @action(detail=True, methods=["get"], url_path="active-order")
    def active_order(self, request: Request, pk=None) -> Response:
        order = OrderService.active_order_for_table(pk)
        return Response({"order_id": order.pk if order else None})

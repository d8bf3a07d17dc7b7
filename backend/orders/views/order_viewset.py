from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
import logging

from orders.filters import OrderFilter
from orders.models import Order
from orders.serializers import (
    OrderSerializer,
    ServicePercentageSerializer,
    serialize_order_detail,
)
from orders.services import (
    OrderCalculationService,
    OrderService,
    TicketEmissionService,
    TRIGGER_MANUAL,
)

logger = logging.getLogger(__name__)


def emission_status(result) -> int:
    """HTTP status for an emission outcome."""
    if result.deduplicated:
        return status.HTTP_202_ACCEPTED
    if result.ok:
        return status.HTTP_200_OK
    if result.succeeded:
        return status.HTTP_207_MULTI_STATUS
    return status.HTTP_502_BAD_GATEWAY


class OrderViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Orders are created by claiming a table and changed through the item
    endpoints; this viewset covers reading them and their lifecycle actions.
    Domain errors propagate to the project exception handler.
    """

    queryset = Order.objects.select_related("table", "server")
    lookup_value_regex = r"\d+"
    serializer_class = OrderSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = OrderFilter

    def retrieve(self, request: Request, pk=None) -> Response:
        return Response(serialize_order_detail(pk))

    @action(detail=True, methods=["post"], url_path="service-percentage")
    def service_percentage(self, request: Request, pk=None) -> Response:
        serializer = ServicePercentageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        totals = OrderCalculationService.set_service_percentage(
            pk, serializer.validated_data["service_percentage"]
        )
        return Response({"order_id": int(pk), "totals": totals.to_dict()})

    @action(detail=True, methods=["post"], url_path="void")
    def void(self, request: Request, pk=None) -> Response:
        order = OrderService.void_order(pk)
        logger.info(f"Order {order.number} voided by {request.user}")
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"], url_path="close")
    def close(self, request: Request, pk=None) -> Response:
        order = OrderService.close_order(pk)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"], url_path="print-bill")
    def print_bill(self, request: Request, pk=None) -> Response:
        result = TicketEmissionService.print_bill(
            pk, service_percentage=request.data.get("service_percentage")
        )
        return Response(result.to_dict(), status=emission_status(result))

    @action(detail=True, methods=["post"], url_path="emit-tickets")
    def emit_tickets(self, request: Request, pk=None) -> Response:
        result = TicketEmissionService.emit_kitchen_tickets(pk, trigger=TRIGGER_MANUAL)
        return Response(result.to_dict(), status=emission_status(result))

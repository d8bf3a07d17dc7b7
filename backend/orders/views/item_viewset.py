from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.serializers import (
    AddItemSerializer,
    AttachAddOnSerializer,
    GroupNoteSerializer,
    GroupSerializer,
    ItemNoteSerializer,
    UpdateQuantitySerializer,
)
from orders.services import OrderItemService


class OrderItemViewSet(viewsets.ViewSet):
    """
    A ViewSet for the line items of one order, nested under
    ``/orders/{order_pk}/items/``.

    Every mutation answers with the order's recomputed totals.
    """

    lookup_value_regex = r"\d+"

    def _totals_response(self, totals, status_code=status.HTTP_200_OK) -> Response:
        return Response(
            {"order_id": int(self.kwargs["order_pk"]), "totals": totals.to_dict()},
            status=status_code,
        )

    def create(self, request: Request, order_pk=None) -> Response:
        serializer = AddItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        totals = OrderItemService.add_product(
            order_pk,
            serializer.validated_data["product_id"],
            add_on_ids=serializer.validated_data["add_on_ids"],
            note=serializer.validated_data["note"],
        )
        return self._totals_response(totals, status.HTTP_201_CREATED)

    def partial_update(self, request: Request, order_pk=None, pk=None) -> Response:
        serializer = UpdateQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        if serializer.validated_data["op"] == UpdateQuantitySerializer.INCREMENT:
            totals = OrderItemService.increment(pk, order_id=order_pk)
        else:
            totals = OrderItemService.decrement(pk, order_id=order_pk)
        return self._totals_response(totals)

    def destroy(self, request: Request, order_pk=None, pk=None) -> Response:
        totals = OrderItemService.remove_item(pk, order_id=order_pk)
        return self._totals_response(totals)

    @action(detail=True, methods=["post"], url_path="add-ons")
    def add_ons(self, request: Request, order_pk=None, pk=None) -> Response:
        serializer = AttachAddOnSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        totals = OrderItemService.attach_add_on(
            pk, serializer.validated_data["add_on_id"], order_id=order_pk
        )
        return self._totals_response(totals)

    @action(detail=True, methods=["patch"], url_path="note")
    def note(self, request: Request, order_pk=None, pk=None) -> Response:
        serializer = ItemNoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        note = OrderItemService.set_note(pk, serializer.validated_data["note"], order_id=order_pk)
        return Response({"item_id": int(pk), "note": note})

    @action(detail=False, methods=["post"], url_path="remove-group")
    def remove_group(self, request: Request, order_pk=None) -> Response:
        serializer = GroupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        totals = OrderItemService.remove_group(order_pk, serializer.validated_data["item_ids"])
        return self._totals_response(totals)

    @action(detail=False, methods=["post"], url_path="group-note")
    def group_note(self, request: Request, order_pk=None) -> Response:
        serializer = GroupNoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        note = OrderItemService.set_group_note(
            order_pk,
            serializer.validated_data["item_ids"],
            serializer.validated_data["note"],
        )
        return Response({"item_ids": serializer.validated_data["item_ids"], "note": note})

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from .models import Product
from .serializers import AddOnSerializer, ProductSerializer


class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Active menu products for the order screen.

    Supports ``?category=<id>`` to narrow the list to one category.
    """

    queryset = Product.objects.filter(is_active=True).select_related("category__kitchen_zone")
    lookup_value_regex = r"\d+"
    serializer_class = ProductSerializer
    filterset_fields = ["category"]

    @action(detail=True, methods=["get"], url_path="add-ons")
    def add_ons(self, request: Request, pk=None) -> Response:
        """Active add-ons that may be attached to this product, with their extra price."""
        product = self.get_object()
        add_ons = product.allowed_add_ons.filter(is_active=True).order_by("name")
        return Response(AddOnSerializer(add_ons, many=True).data)

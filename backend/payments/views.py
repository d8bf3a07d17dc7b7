from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status
import logging

from .services import PaymentService

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def pay_order(request, order_id):
    """
    Settle an order at the table.

    Body: {"cash_amount": "20000", "card_amount": "3100"}; either may be omitted.
    Kitchen tickets for the paid order are queued after the payment commits;
    a printing failure never undoes the payment.
    """
    payment = PaymentService.pay(
        order_id,
        cash_amount=request.data.get('cash_amount'),
        card_amount=request.data.get('card_amount'),
        cashier=request.user,
    )
    return Response(payment.to_dict(), status=status.HTTP_201_CREATED)

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status
import logging

from .models import KDSStatus, KDSTicket, KDSTicketItem
from .services import KDSTicketService

logger = logging.getLogger(__name__)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def open_tickets(request):
    """
    Pending and preparing tickets, oldest first.

    Query parameters:
    - channel: Only tickets of this channel (optional)
    """
    channel = request.GET.get('channel', '').strip() or None
    tickets = KDSTicketService.list_open_tickets(channel)
    return Response({'tickets': [t.to_dict() for t in tickets]}, status=status.HTTP_200_OK)


def _requested_status(request):
    new_status = request.data.get('status')
    if new_status not in KDSStatus.values:
        return None
    return new_status


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def update_ticket(request, ticket_id):
    new_status = _requested_status(request)
    if new_status is None:
        return Response(
            {'error': f"status must be one of {', '.join(KDSStatus.values)}"},
            status=status.HTTP_400_BAD_REQUEST
        )
    try:
        ticket = KDSTicketService.update_ticket_status(ticket_id, new_status)
    except KDSTicket.DoesNotExist:
        return Response({'error': f'KDS ticket {ticket_id} not found'}, status=status.HTTP_404_NOT_FOUND)
    except ValueError as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
    return Response(ticket.to_dict(), status=status.HTTP_200_OK)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def update_item(request, item_id):
    new_status = _requested_status(request)
    if new_status is None:
        return Response(
            {'error': f"status must be one of {', '.join(KDSStatus.values)}"},
            status=status.HTTP_400_BAD_REQUEST
        )
    try:
        item = KDSTicketService.update_item_status(item_id, new_status)
    except KDSTicketItem.DoesNotExist:
        return Response({'error': f'KDS item {item_id} not found'}, status=status.HTTP_404_NOT_FOUND)
    except ValueError as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

    item.ticket.refresh_from_db()
    return Response({'item': item.to_dict(), 'ticket_status': item.ticket.status}, status=status.HTTP_200_OK)

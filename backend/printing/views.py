from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.response import Response
from rest_framework import status
import logging

from .models import PrintJob
from .permissions import HasPrintAgentToken
from .services import PrintAgentService

logger = logging.getLogger(__name__)


@api_view(['GET'])
@authentication_classes([])
@permission_classes([HasPrintAgentToken])
def pending_jobs(request):
    """
    Jobs the agent still has to print, oldest first.

    Query parameters:
    - printer: Printer name (optional, all printers when omitted)
    - limit: Maximum jobs to return (default: PRINT_AGENT_BATCH_SIZE)
    """
    printer_name = request.GET.get('printer', '').strip() or None
    try:
        limit = int(request.GET.get('limit', 0)) or None
    except ValueError:
        return Response({'error': 'limit must be an integer'}, status=status.HTTP_400_BAD_REQUEST)
    if limit is not None:
        limit = max(1, min(limit, 100))

    jobs = PrintAgentService.pending_jobs(printer_name, limit)
    return Response({'jobs': [job.to_dict() for job in jobs]}, status=status.HTTP_200_OK)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([HasPrintAgentToken])
def acknowledge_job(request, job_id):
    """
    Body: {"ok": true} or {"ok": false, "error": "paper out"}
    """
    ok = request.data.get('ok')
    if not isinstance(ok, bool):
        return Response({'error': 'ok must be a boolean'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        job = PrintAgentService.acknowledge(job_id, ok, request.data.get('error') or '')
    except PrintJob.DoesNotExist:
        return Response({'error': f'Print job {job_id} not found'}, status=status.HTTP_404_NOT_FOUND)

    return Response({'ok': True, 'id': job.pk, 'status': job.status}, status=status.HTTP_200_OK)

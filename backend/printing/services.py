from django.conf import settings
from django.db import transaction
from django.db.models import F
import logging
from typing import List

from .models import PrintJob

logger = logging.getLogger(__name__)


class PrintSinkError(Exception):
    """Raised when a ticket cannot be queued for its printer."""
    pass


class PrintJobSink:
    """
    Print sink backed by the PrintJob queue. Tickets are enqueued here and
    printed by the agent polling ``/api/print-jobs/pending/``.
    """

    @staticmethod
    def submit(payload, trigger: str = "manual") -> PrintJob:
        """
        Queue a ticket payload for its resolved printer.

        Raises:
            PrintSinkError: If the payload has no printer or the printer is inactive
        """
        printer = payload.printer
        if printer is None:
            raise PrintSinkError(f"No printer assigned for channel {payload.channel}")
        if not printer.is_active:
            raise PrintSinkError(f"Printer {printer.name} is inactive")

        job = PrintJob.objects.create(
            printer=printer,
            order_id=payload.header.order_id,
            kind=payload.kind,
            channel=payload.channel,
            body=payload.to_dict(),
            fingerprint=payload.fingerprint,
            trigger=trigger,
        )
        logger.info(
            f"Queued {payload.kind} ticket for order {payload.header.number} "
            f"channel {payload.channel} on {printer.name} (job {job.pk})"
        )
        return job

    @staticmethod
    def already_queued(order_id, channel: str, fingerprint: str) -> bool:
        """True when an identical ticket for this order and channel was queued and did not fail."""
        return (
            PrintJob.objects.filter(order_id=order_id, channel=channel, fingerprint=fingerprint)
            .exclude(status=PrintJob.Status.ERROR)
            .exists()
        )


class PrintAgentService:
    """Queue operations used by the print agent."""

    @staticmethod
    def pending_jobs(printer_name: str = None, limit: int = None) -> List[PrintJob]:
        """Oldest jobs not yet printed, optionally for one printer."""
        limit = limit or getattr(settings, "PRINT_AGENT_BATCH_SIZE", 20)
        queryset = PrintJob.objects.select_related("printer").exclude(
            status=PrintJob.Status.PRINTED
        )
        if printer_name:
            queryset = queryset.filter(printer__name=printer_name)
        return list(queryset.order_by("created_at", "id")[:limit])

    @staticmethod
    @transaction.atomic
    def acknowledge(job_id, ok: bool, error: str = "") -> PrintJob:
        """
        Record the agent's outcome for a job.

        Raises:
            PrintJob.DoesNotExist: If the job does not exist
        """
        job = PrintJob.objects.select_for_update().get(pk=job_id)
        job.status = PrintJob.Status.PRINTED if ok else PrintJob.Status.ERROR
        job.error = "" if ok else (error or "Unknown printer error")[:500]
        job.save(update_fields=["status", "error", "updated_at"])
        PrintJob.objects.filter(pk=job.pk).update(attempts=F("attempts") + 1)
        if ok:
            logger.info(f"Print job {job.pk} printed on {job.printer_id}")
        else:
            logger.error(f"Print job {job.pk} failed on {job.printer_id}: {job.error}")
        return job


from typing import List, Optional
from django.conf import settings
from django.db import transaction
from django.utils import timezone
import logging

from ..models import KDSStatus, KDSTicket, KDSTicketItem

logger = logging.getLogger(__name__)


class KDSTicketService:
    """Centralized business logic for kitchen display tickets"""

    # Items may move forward or be stepped back one state by a cook who tapped too early
    VALID_ITEM_TRANSITIONS = {
        KDSStatus.PENDING: [KDSStatus.PREPARING, KDSStatus.READY],
        KDSStatus.PREPARING: [KDSStatus.READY, KDSStatus.PENDING],
        KDSStatus.READY: [KDSStatus.PREPARING],
    }

    VALID_TICKET_TRANSITIONS = {
        KDSStatus.PENDING: [KDSStatus.PREPARING, KDSStatus.READY],
        KDSStatus.PREPARING: [KDSStatus.READY],
        KDSStatus.READY: [],
    }

    @staticmethod
    def is_mirrored_channel(channel: str) -> bool:
        allowed = [c.strip().upper() for c in getattr(settings, 'KDS_CHANNELS', [])]
        return '*' in allowed or channel.strip().upper() in allowed

    @classmethod
    @transaction.atomic
    def mirror(cls, payload) -> Optional[KDSTicket]:
        """
        Create a display ticket for a kitchen ticket payload.

        Returns None when the channel is not on the KDS_CHANNELS allow-list or
        when an identical ticket for the same order and channel is still open.
        Each line of quantity N becomes N items so units can be marked ready
        one at a time.
        """
        if not cls.is_mirrored_channel(payload.channel):
            logger.debug(f"Channel {payload.channel} is not mirrored to KDS")
            return None

        header = payload.header
        duplicate = KDSTicket.objects.open_tickets(payload.channel).filter(
            order_id=header.order_id, fingerprint=payload.fingerprint
        ).first()
        if duplicate is not None:
            logger.info(f"Identical KDS ticket {duplicate.id} already open for order {header.number}")
            return None

        ticket = KDSTicket.objects.create(
            order_id=header.order_id,
            channel=payload.channel,
            order_number=header.number,
            table_number=header.table_number,
            server_name=header.server_name,
            fingerprint=payload.fingerprint,
        )
        KDSTicketItem.objects.bulk_create([
            KDSTicketItem(
                ticket=ticket,
                product_name=line.product_name,
                note=line.note,
                add_ons=list(line.add_ons),
                quantity=1,
            )
            for line in payload.lines
            for _ in range(line.quantity)
        ])
        logger.info(f"Created KDS ticket {ticket.id} for order {header.number} on {payload.channel}")

        from ..events.publishers import KDSEventPublisher
        KDSEventPublisher.ticket_created(ticket)
        return ticket

    @classmethod
    @transaction.atomic
    def update_item_status(cls, item_id, new_status: str) -> KDSTicketItem:
        """
        Change one unit's status and derive the ticket status from its items:
        all ready -> ticket ready; any started -> ticket preparing.

        Raises:
            KDSTicketItem.DoesNotExist: If the item does not exist
            ValueError: If the transition is not allowed
        """
        item = KDSTicketItem.objects.select_for_update().select_related('ticket').get(pk=item_id)
        old_status = item.status
        if new_status not in cls.VALID_ITEM_TRANSITIONS.get(old_status, []):
            raise ValueError(f"Cannot move item from {old_status} to {new_status}")

        now = timezone.now()
        item.status = new_status
        if new_status == KDSStatus.PREPARING and item.started_at is None:
            item.started_at = now
        if new_status == KDSStatus.READY:
            item.ready_at = now
        else:
            item.ready_at = None
        item.save(update_fields=['status', 'started_at', 'ready_at'])

        from ..events.publishers import KDSEventPublisher
        KDSEventPublisher.item_status_changed(item, old_status, new_status)

        cls._sync_ticket_status(item.ticket)
        return item

    @classmethod
    def _sync_ticket_status(cls, ticket: KDSTicket):
        statuses = list(ticket.items.values_list('status', flat=True))
        if statuses and all(s == KDSStatus.READY for s in statuses):
            derived = KDSStatus.READY
        elif any(s != KDSStatus.PENDING for s in statuses):
            derived = KDSStatus.PREPARING
        else:
            derived = KDSStatus.PENDING

        if derived != ticket.status:
            cls._set_ticket_status(ticket, derived)

    @classmethod
    @transaction.atomic
    def update_ticket_status(cls, ticket_id, new_status: str) -> KDSTicket:
        """
        Bump a whole ticket. Marking it ready marks every item ready.

        Raises:
            KDSTicket.DoesNotExist: If the ticket does not exist
            ValueError: If the transition is not allowed
        """
        ticket = KDSTicket.objects.select_for_update().get(pk=ticket_id)
        if new_status not in cls.VALID_TICKET_TRANSITIONS.get(ticket.status, []):
            raise ValueError(f"Cannot move ticket from {ticket.status} to {new_status}")

        if new_status == KDSStatus.READY:
            ticket.items.exclude(status=KDSStatus.READY).update(
                status=KDSStatus.READY, ready_at=timezone.now()
            )
        cls._set_ticket_status(ticket, new_status)
        return ticket

    @staticmethod
    def _set_ticket_status(ticket: KDSTicket, new_status: str):
        old_status = ticket.status
        now = timezone.now()
        ticket.status = new_status
        if new_status == KDSStatus.PREPARING and ticket.started_at is None:
            ticket.started_at = now
        ticket.ready_at = now if new_status == KDSStatus.READY else None
        ticket.save(update_fields=['status', 'started_at', 'ready_at', 'updated_at'])
        logger.info(f"KDS ticket {ticket.id} {old_status} -> {new_status}")

        from ..events.publishers import KDSEventPublisher
        KDSEventPublisher.ticket_status_changed(ticket, old_status, new_status)

    @staticmethod
    def list_open_tickets(channel: Optional[str] = None) -> List[KDSTicket]:
        """Pending and preparing tickets, oldest first"""
        return list(KDSTicket.objects.open_tickets(channel))

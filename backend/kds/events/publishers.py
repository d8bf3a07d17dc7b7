import logging
from django.db import transaction
from ..services.notification_service import notification_service

logger = logging.getLogger(__name__)


class KDSEventPublisher:
    """Centralized event publishing for KDS events"""

    @staticmethod
    def _after_commit(callback):
        # Displays re-read the ticket on notification, so it must be committed first
        if transaction.get_connection().in_atomic_block:
            transaction.on_commit(callback)
        else:
            callback()

    @staticmethod
    def ticket_created(ticket):
        """Publish ticket created event"""
        logger.info(f"Publishing ticket_created event for order {ticket.order_number} ({ticket.channel})")
        KDSEventPublisher._after_commit(lambda: notification_service.ticket_created(ticket))

    @staticmethod
    def ticket_status_changed(ticket, old_status: str, new_status: str):
        """Publish ticket status change event"""
        logger.info(f"Publishing ticket_status_changed event for ticket {ticket.id}: {old_status} -> {new_status}")
        KDSEventPublisher._after_commit(lambda: notification_service.ticket_updated(ticket, old_status))

    @staticmethod
    def item_status_changed(item, old_status: str, new_status: str):
        """Publish item status change event"""
        logger.info(f"Publishing item_status_changed event for item {item.id}: {old_status} -> {new_status}")
        KDSEventPublisher._after_commit(
            lambda: notification_service.item_updated(item, old_status, new_status)
        )

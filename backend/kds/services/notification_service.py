from typing import Dict, Any
import logging
from channels.layers import get_channel_layer
from asgiref.sync import async_to_sync
from django.utils import timezone

logger = logging.getLogger(__name__)

ALL_CHANNELS_GROUP = 'kds_all'


def group_name_for(channel: str) -> str:
    """Channels group for a ticket channel (only ASCII alphanumerics, hyphens, underscores, periods)"""
    sanitized = ''.join(c if c.isascii() and (c.isalnum() or c in '-_.') else '_' for c in channel.upper())
    return f'kds_{sanitized}'


class KDSNotificationService:
    """Service for handling KDS WebSocket notifications"""

    def notify_channel(self, channel: str, message_type: str, data: Dict[str, Any]):
        """Send a notification to one channel's displays and to the all-channels group"""
        channel_layer = get_channel_layer()
        if not channel_layer:
            logger.warning("No channel layer available for notifications")
            return

        message = {
            'type': 'kds_notification',
            'message_type': message_type,
            'channel': channel,
            'data': data,
            'timestamp': timezone.now().isoformat(),
        }
        for group in (group_name_for(channel), ALL_CHANNELS_GROUP):
            try:
                async_to_sync(channel_layer.group_send)(group, message)
            except Exception as e:
                logger.error(f"Error sending {message_type} to group {group}: {e}")

    def ticket_created(self, ticket):
        self.notify_channel(ticket.channel, 'ticket_created', ticket.to_dict())

    def ticket_updated(self, ticket, old_status):
        data = ticket.to_dict()
        data['old_status'] = old_status
        self.notify_channel(ticket.channel, 'ticket_updated', data)

    def item_updated(self, item, old_status, new_status):
        self.notify_channel(item.ticket.channel, 'item_updated', {
            'ticket_id': item.ticket_id,
            'item': item.to_dict(),
            'old_status': old_status,
            'new_status': new_status,
        })


notification_service = KDSNotificationService()

from channels.generic.websocket import AsyncJsonWebsocketConsumer
from channels.db import database_sync_to_async
import logging

from .models import KDSTicketItem
from .services.notification_service import ALL_CHANNELS_GROUP, group_name_for
from .services.ticket_service import KDSTicketService

logger = logging.getLogger(__name__)


class KDSConsumer(AsyncJsonWebsocketConsumer):
    """
    WebSocket consumer for a kitchen display.
    ``ws/kds/<channel>/`` follows one channel; ``ws/kds/all/`` follows every channel.
    """

    async def connect(self):
        self.kds_channel = self.scope['url_route']['kwargs'].get('channel', '')
        if self.kds_channel.lower() == 'all':
            self.group_name = ALL_CHANNELS_GROUP
            self.kds_channel = None
        else:
            self.group_name = group_name_for(self.kds_channel)

        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        await self.send_json({
            'type': 'initial_data',
            'tickets': await self.get_open_tickets(),
        })
        logger.info(f"KDS WebSocket connected: group={self.group_name}")

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.group_name, self.channel_name)
        logger.info(f"KDS WebSocket disconnected: group={self.group_name}, code={close_code}")

    async def receive_json(self, content, **kwargs):
        action = content.get('action')
        if action == 'update_item_status':
            await self.handle_update_item_status(content)
        elif action == 'refresh_data':
            await self.send_json({'type': 'initial_data', 'tickets': await self.get_open_tickets()})
        elif action == 'ping':
            await self.send_json({'type': 'pong'})
        else:
            await self.send_json({'type': 'error', 'message': f"Unknown action: {action}"})

    async def handle_update_item_status(self, content):
        item_id = content.get('item_id')
        new_status = content.get('status')
        if not item_id or not new_status:
            await self.send_json({'type': 'error', 'message': 'Missing item_id or status'})
            return
        try:
            await database_sync_to_async(KDSTicketService.update_item_status)(item_id, new_status)
        except KDSTicketItem.DoesNotExist:
            await self.send_json({'type': 'error', 'message': f'KDS item {item_id} not found'})
        except ValueError as e:
            await self.send_json({'type': 'error', 'message': str(e)})

    async def kds_notification(self, event):
        """Forward group messages to the display"""
        await self.send_json({
            'type': event['message_type'],
            'channel': event.get('channel'),
            'data': event.get('data', {}),
            'timestamp': event.get('timestamp'),
        })

    @database_sync_to_async
    def get_open_tickets(self):
        return [t.to_dict() for t in KDSTicketService.list_open_tickets(self.kds_channel)]

from .ticket_service import KDSTicketService
from .notification_service import KDSNotificationService

__all__ = ['KDSTicketService', 'KDSNotificationService']

from django.db import models
from django.utils import timezone
from orders.models import Order


class KDSStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PREPARING = 'preparing', 'Preparing'
    READY = 'ready', 'Ready'


class KDSTicketManager(models.Manager):
    """Custom manager for KDS tickets"""

    def get_optimized_queryset(self):
        """Get queryset with optimized joins for performance"""
        return self.select_related('order').prefetch_related('items')

    def open_tickets(self, channel=None):
        queryset = self.get_optimized_queryset().filter(
            status__in=[KDSStatus.PENDING, KDSStatus.PREPARING]
        )
        if channel:
            queryset = queryset.filter(channel=channel.strip().upper())
        return queryset.order_by('created_at', 'id')


class KDSTicket(models.Model):
    """One kitchen display ticket per emitted channel ticket"""
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='kds_tickets')
    channel = models.CharField(max_length=100, db_index=True)
    status = models.CharField(max_length=20, choices=KDSStatus.choices, default=KDSStatus.PENDING)

    # Header snapshot, so the display does not depend on later order edits
    order_number = models.PositiveIntegerField()
    table_number = models.PositiveIntegerField()
    server_name = models.CharField(max_length=150, blank=True)

    fingerprint = models.CharField(max_length=40, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    started_at = models.DateTimeField(null=True, blank=True)
    ready_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = KDSTicketManager()

    class Meta:
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['status', 'created_at'], name='kds_ticket_status_idx'),
            models.Index(fields=['channel', 'status'], name='kds_ticket_channel_idx'),
            models.Index(fields=['order', 'channel', 'fingerprint'], name='kds_ticket_dedup_idx'),
        ]

    def __str__(self):
        return f"KDS-{self.order_number}-{self.channel}"

    @property
    def age_seconds(self):
        return int((timezone.now() - self.created_at).total_seconds())

    def to_dict(self):
        return {
            'id': self.id,
            'order_id': self.order_id,
            'order_number': self.order_number,
            'channel': self.channel,
            'table_number': self.table_number,
            'server_name': self.server_name,
            'status': self.status,
            'age_seconds': self.age_seconds,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'items': [item.to_dict() for item in self.items.all()],
        }


class KDSTicketItem(models.Model):
    """A single physical unit to prepare; a line of quantity 3 becomes three items"""
    ticket = models.ForeignKey(KDSTicket, on_delete=models.CASCADE, related_name='items')
    product_name = models.CharField(max_length=200)
    note = models.CharField(max_length=160, blank=True, default='')
    add_ons = models.JSONField(default=list, blank=True)
    quantity = models.PositiveIntegerField(default=1)
    status = models.CharField(max_length=20, choices=KDSStatus.choices, default=KDSStatus.PENDING)

    started_at = models.DateTimeField(null=True, blank=True)
    ready_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['id']
        indexes = [
            models.Index(fields=['ticket', 'status'], name='kds_item_status_idx'),
        ]

    def __str__(self):
        return f"{self.product_name} ({self.status})"

    def to_dict(self):
        return {
            'id': self.id,
            'product_name': self.product_name,
            'quantity': self.quantity,
            'note': self.note,
            'add_ons': self.add_ons,
            'status': self.status,
        }

from django.db import models


class Printer(models.Model):
    """
    A physical printer reachable through the print agent queue.
    Jobs are addressed to printers by ``name``.
    """

    PRINTER_TYPE_CHOICES = [
        ('receipt', 'Receipt Printer'),
        ('kitchen', 'Kitchen Printer'),
    ]

    name = models.CharField(
        max_length=100,
        unique=True,
        help_text="Queue name the print agent polls (e.g., 'XPrinter 80mm')"
    )
    printer_type = models.CharField(
        max_length=20,
        choices=PRINTER_TYPE_CHOICES,
        default='kitchen',
        help_text="Type of printer: receipt or kitchen"
    )

    # Network configuration, informational for the agent
    ip_address = models.GenericIPAddressField(
        null=True,
        blank=True,
        help_text="IP address of the network printer"
    )
    port = models.IntegerField(
        default=9100,
        help_text="Port number for printer communication"
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this printer is currently active"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['printer_type', 'name']
        indexes = [
            models.Index(fields=['printer_type', 'is_active'], name='printer_type_active_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_printer_type_display()})"


class KitchenZone(models.Model):
    """
    A preparation sector (kitchen, grill, bar...) that receives its own
    ticket. Categories point at the zone that prepares them.
    """

    name = models.CharField(
        max_length=100,
        unique=True,
        help_text="Sector name (e.g., 'Cocina', 'Parrilla'). Tickets use it upper-cased."
    )

    printer = models.ForeignKey(
        'Printer',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='kitchen_zones',
        help_text="Printer assigned to this zone"
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this kitchen zone is currently active"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def channel(self):
        return self.name.strip().upper()

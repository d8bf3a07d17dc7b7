from django.db import models
from django.utils.translation import gettext_lazy as _


class PrintJob(models.Model):
    """
    A rendered ticket waiting for the print agent attached to ``printer``.
    """

    class Kind(models.TextChoices):
        BILL = "bill", _("Bill")
        KITCHEN = "kitchen", _("Kitchen ticket")

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        PRINTED = "PRINTED", _("Printed")
        ERROR = "ERROR", _("Error")

    printer = models.ForeignKey(
        "settings.Printer", on_delete=models.PROTECT, related_name="jobs"
    )
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="print_jobs",
    )
    kind = models.CharField(max_length=10, choices=Kind.choices)
    channel = models.CharField(max_length=100)
    body = models.JSONField(help_text=_("Ticket payload as built for this channel."))
    fingerprint = models.CharField(max_length=40, db_index=True)
    trigger = models.CharField(max_length=20, default="manual")
    status = models.CharField(
        max_length=10, choices=Status.choices, default=Status.PENDING
    )
    error = models.TextField(blank=True, default="")
    attempts = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["printer", "status", "created_at"], name="printjob_queue_idx"),
            models.Index(fields=["order", "channel", "fingerprint"], name="printjob_dedup_idx"),
        ]

    def __str__(self):
        return f"{self.kind} job {self.pk} for {self.channel} on {self.printer_id} - {self.status}"

    def to_dict(self):
        return {
            "id": self.pk,
            "printer": self.printer.name,
            "kind": self.kind,
            "channel": self.channel,
            "order_id": self.order_id,
            "status": self.status,
            "body": self.body,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

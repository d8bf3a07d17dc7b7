from decimal import Decimal
from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from orders.models import Order


class Payment(models.Model):
    """
    Settlement of an order at the table. An order is paid at most once.
    """

    class Method(models.TextChoices):
        CASH = "CASH", _("Cash")
        CARD = "CARD", _("Card")
        MIXED = "MIXED", _("Cash and card")

    order = models.OneToOneField(
        Order, on_delete=models.PROTECT, related_name="payment"
    )
    cashier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payments_taken",
    )
    method = models.CharField(max_length=10, choices=Method.choices)
    amount_due = models.DecimalField(
        max_digits=12,
        decimal_places=0,
        help_text=_("Order total at the time of payment."),
    )
    cash_amount = models.DecimalField(max_digits=12, decimal_places=0, default=Decimal("0"))
    card_amount = models.DecimalField(max_digits=12, decimal_places=0, default=Decimal("0"))
    tendered = models.DecimalField(max_digits=12, decimal_places=0)
    change = models.DecimalField(
        max_digits=12,
        decimal_places=0,
        default=Decimal("0"),
        help_text=_("Amount returned to the guest (vuelto)."),
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")

    def __str__(self):
        return f"Payment for order {self.order.number}: {self.tendered} ({self.method})"

    def to_dict(self):
        return {
            "id": self.pk,
            "order_id": self.order_id,
            "method": self.method,
            "amount_due": str(self.amount_due),
            "cash_amount": str(self.cash_amount),
            "card_amount": str(self.card_amount),
            "tendered": str(self.tendered),
            "change": str(self.change),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

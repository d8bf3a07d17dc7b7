from decimal import Decimal
from django.db import models
from django.conf import settings
from django.utils.translation import gettext_lazy as _
from products.models import AddOn, Product


class Table(models.Model):
    class TableStatus(models.TextChoices):
        FREE = "FREE", _("Free")
        OCCUPIED = "OCCUPIED", _("Occupied")

    number = models.PositiveIntegerField(unique=True)
    status = models.CharField(
        max_length=10, choices=TableStatus.choices, default=TableStatus.FREE
    )
    server = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="tables",
        help_text=_("Server currently attending the table. Cleared when the table is freed."),
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["number"]
        verbose_name = _("Table")
        verbose_name_plural = _("Tables")

    def __str__(self):
        return f"Table {self.number} ({self.status})"


class Order(models.Model):
    class OrderStatus(models.TextChoices):
        OPEN = "OPEN", _("Open")  # Being built, nothing sent yet
        SENT = "SENT", _("Sent")  # Kitchen tickets emitted at least once
        PAID = "PAID", _("Paid")
        VOIDED = "VOIDED", _("Voided")

    ACTIVE_STATUSES = (OrderStatus.OPEN, OrderStatus.SENT)
    TERMINAL_STATUSES = (OrderStatus.PAID, OrderStatus.VOIDED)

    number = models.PositiveIntegerField(
        unique=True, help_text=_("Human-facing sequential order number.")
    )
    table = models.ForeignKey(
        Table, on_delete=models.PROTECT, related_name="orders"
    )
    server = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders_as_server",
    )
    status = models.CharField(
        max_length=10, choices=OrderStatus.choices, default=OrderStatus.OPEN
    )

    # Null means "use DEFAULT_SERVICE_PERCENTAGE"
    service_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        default=Decimal("10"),
        help_text=_("Service charge percentage between 0 and 100."),
    )

    # --- Financial Fields (recomputed after every mutation) ---
    subtotal = models.DecimalField(max_digits=12, decimal_places=0, default=0)
    service_charge = models.DecimalField(max_digits=12, decimal_places=0, default=0)
    total = models.DecimalField(max_digits=12, decimal_places=0, default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    sent_at = models.DateTimeField(null=True, blank=True)
    closed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "number"]
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        indexes = [
            models.Index(fields=["table", "status"], name="order_table_stat_idx"),
            models.Index(fields=["status", "created_at"], name="order_stat_created_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["table"],
                condition=models.Q(status__in=["OPEN", "SENT"]),
                name="unique_active_order_per_table",
            ),
        ]

    def __str__(self):
        return f"Order {self.number} (table {self.table_id}) - {self.status}"

    @property
    def is_active(self):
        return self.status in self.ACTIVE_STATUSES

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(
        Product, on_delete=models.PROTECT, related_name="order_items"
    )
    quantity = models.PositiveIntegerField(default=1)
    # Price snapshot
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=0,
        help_text=_("Price of the product at the time it was added."),
    )
    note = models.CharField(
        max_length=160, blank=True, default="",
        help_text=_("Kitchen note, e.g. 'sin cebolla'"),
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Order Item")
        verbose_name_plural = _("Order Items")
        ordering = ["id"]
        indexes = [
            models.Index(fields=["order", "product"], name="item_order_product_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1), name="order_item_quantity_positive"
            ),
        ]

    def __str__(self):
        return f"{self.quantity} of {self.product.name} in Order {self.order.number}"


class OrderItemAddOn(models.Model):
    item = models.ForeignKey(
        OrderItem, on_delete=models.CASCADE, related_name="add_ons"
    )
    add_on = models.ForeignKey(
        AddOn, on_delete=models.PROTECT, related_name="order_item_add_ons"
    )
    # Price snapshot, charged once per unit of the parent item
    extra_price = models.DecimalField(max_digits=12, decimal_places=0, default=0)

    class Meta:
        ordering = ["add_on_id"]
        constraints = [
            models.UniqueConstraint(
                fields=["item", "add_on"], name="unique_add_on_per_item"
            ),
        ]

    def __str__(self):
        return f"{self.add_on.name} (+{self.extra_price}) on item {self.item_id}"

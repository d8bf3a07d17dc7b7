"""
Persistence boundary of the order engine.

``OrderStore`` is the only place that reads or writes orders, line items,
add-on attachments and tables. Reads always hit the database; nothing is
cached between calls, so totals are never computed from stale rows.
"""
import logging
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import F, Max
from django.utils import timezone

from settings.services import channel_for_zone

from .exceptions import OrderNotFoundError
from .models import Order, OrderItem, OrderItemAddOn, Table
from .records import AddOnRow, LineItemRow, OrderHeader

logger = logging.getLogger(__name__)


def clean_note(text) -> str:
    """Trim a kitchen note and cut it to ORDER_NOTE_MAX_LENGTH characters."""
    max_length = getattr(settings, "ORDER_NOTE_MAX_LENGTH", 160)
    return str(text or "").strip()[:max_length]


class OrderStore:
    # --- Reads ---

    @staticmethod
    def get_order(order_id, for_update=False) -> Order:
        queryset = Order.objects.select_related("table", "server")
        if for_update:
            queryset = Order.objects.select_for_update()
        try:
            return queryset.get(pk=order_id)
        except (Order.DoesNotExist, ValueError, TypeError):
            raise OrderNotFoundError("Order", order_id)

    @staticmethod
    def get_order_header(order_id) -> OrderHeader:
        order = OrderStore.get_order(order_id)
        return OrderHeader(
            order_id=order.pk,
            number=order.number,
            table_id=order.table_id,
            table_number=order.table.number,
            server_id=order.server_id,
            server_name=order.server.display_name if order.server else "",
            status=order.status,
            service_percentage=order.service_percentage,
            created_at=order.created_at,
        )

    @staticmethod
    def list_line_items(order_id) -> List[LineItemRow]:
        items = (
            OrderItem.objects.filter(order_id=order_id)
            .select_related("product__category__kitchen_zone")
            .prefetch_related("add_ons__add_on")
            .order_by("id")
        )
        rows = []
        for item in items:
            category = item.product.category
            zone = category.kitchen_zone if category else None
            rows.append(
                LineItemRow(
                    item_id=item.pk,
                    product_id=item.product_id,
                    product_name=item.product.name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    note=item.note,
                    add_ons=[
                        AddOnRow(
                            add_on_id=attachment.add_on_id,
                            name=attachment.add_on.name,
                            extra_price=attachment.extra_price,
                        )
                        for attachment in item.add_ons.all()
                    ],
                    channel=channel_for_zone(zone),
                )
            )
        return rows

    @staticmethod
    def get_line_item(item_id, order_id=None) -> OrderItem:
        queryset = OrderItem.objects.select_related("order", "product")
        if order_id is not None:
            queryset = queryset.filter(order_id=order_id)
        try:
            return queryset.get(pk=item_id)
        except (OrderItem.DoesNotExist, ValueError, TypeError):
            raise OrderNotFoundError("Line item", item_id)

    @staticmethod
    def get_table(table_id, for_update=False) -> Table:
        queryset = Table.objects.select_for_update() if for_update else Table.objects.all()
        try:
            return queryset.get(pk=table_id)
        except (Table.DoesNotExist, ValueError, TypeError):
            raise OrderNotFoundError("Table", table_id)

    @staticmethod
    def find_active_order(table_id) -> Optional[Order]:
        return (
            Order.objects.filter(table_id=table_id, status__in=Order.ACTIVE_STATUSES)
            .order_by("-created_at")
            .first()
        )

    # --- Line item writes ---

    @staticmethod
    def insert_line_item(
        order_id,
        product_id,
        unit_price: Decimal,
        add_ons: Iterable[Tuple[int, Decimal]] = (),
        note: str = "",
        quantity: int = 1,
    ) -> int:
        with transaction.atomic():
            item = OrderItem.objects.create(
                order_id=order_id,
                product_id=product_id,
                quantity=quantity,
                unit_price=unit_price,
                note=clean_note(note),
            )
            OrderItemAddOn.objects.bulk_create(
                [
                    OrderItemAddOn(item=item, add_on_id=add_on_id, extra_price=price)
                    for add_on_id, price in add_ons
                ]
            )
        return item.pk

    @staticmethod
    @transaction.atomic
    def adjust_quantity(item_id, delta: int) -> int:
        """
        Add ``delta`` to a line item's quantity. When the result would drop
        below 1 the item and its add-ons are deleted and 0 is returned.
        """
        try:
            item = OrderItem.objects.select_for_update().get(pk=item_id)
        except (OrderItem.DoesNotExist, ValueError, TypeError):
            raise OrderNotFoundError("Line item", item_id)

        new_quantity = item.quantity + delta
        if new_quantity < 1:
            item.delete()
            return 0

        OrderItem.objects.filter(pk=item_id).update(quantity=F("quantity") + delta)
        return new_quantity

    @staticmethod
    def delete_line_item(item_id) -> int:
        """Delete an item (its add-ons cascade). Returns the owning order id."""
        item = OrderStore.get_line_item(item_id)
        order_id = item.order_id
        item.delete()
        return order_id

    @staticmethod
    def upsert_addon_attachment(item_id, add_on_id, extra_price: Decimal) -> OrderItemAddOn:
        attachment, created = OrderItemAddOn.objects.update_or_create(
            item_id=item_id,
            add_on_id=add_on_id,
            defaults={"extra_price": extra_price},
        )
        return attachment

    @staticmethod
    def set_note(item_id, text) -> str:
        note = clean_note(text)
        updated = OrderItem.objects.filter(pk=item_id).update(note=note)
        if not updated:
            raise OrderNotFoundError("Line item", item_id)
        return note

    # --- Order writes ---

    ORDER_NUMBER_ATTEMPTS = 5

    @staticmethod
    def create_order(table_id, server_id) -> Order:
        """
        Insert an OPEN order with the next display number.

        ``number`` is unique: when a concurrent claim takes the same number
        first, the insert is retried in a savepoint with a higher one. Any
        other IntegrityError (e.g. a second active order for the table)
        propagates.
        """
        candidate = 0
        for attempt in range(1, OrderStore.ORDER_NUMBER_ATTEMPTS + 1):
            last_number = Order.objects.aggregate(last=Max("number"))["last"] or 0
            candidate = max(last_number, candidate) + 1
            try:
                with transaction.atomic():
                    return Order.objects.create(
                        number=candidate,
                        table_id=table_id,
                        server_id=server_id,
                        status=Order.OrderStatus.OPEN,
                        service_percentage=Decimal(
                            str(getattr(settings, "DEFAULT_SERVICE_PERCENTAGE", 10))
                        ),
                    )
            except IntegrityError:
                if not Order.objects.filter(number=candidate).exists():
                    raise
                if attempt == OrderStore.ORDER_NUMBER_ATTEMPTS:
                    raise
                logger.warning(
                    f"Order number {candidate} taken by a concurrent claim, retrying ({attempt})"
                )

    @staticmethod
    def set_service_percentage(order_id, percentage: Decimal):
        Order.objects.filter(pk=order_id).update(service_percentage=percentage)

    @staticmethod
    def persist_totals(order_id, totals):
        Order.objects.filter(pk=order_id).update(
            subtotal=totals.subtotal,
            service_percentage=totals.percentage,
            service_charge=totals.service_charge,
            total=totals.total,
            updated_at=timezone.now(),
        )

    @staticmethod
    def set_order_state(order_id, status):
        fields = {"status": status, "updated_at": timezone.now()}
        if status == Order.OrderStatus.SENT:
            fields["sent_at"] = timezone.now()
        if status in Order.TERMINAL_STATUSES:
            fields["closed_at"] = timezone.now()
        Order.objects.filter(pk=order_id).update(**fields)

    # --- Table writes ---

    @staticmethod
    def claim_table_atomic(table_id, server_id) -> bool:
        """
        Flip a FREE table to OCCUPIED in a single conditional UPDATE.
        Exactly one of several concurrent callers sees True.
        """
        updated = Table.objects.filter(
            pk=table_id, status=Table.TableStatus.FREE
        ).update(status=Table.TableStatus.OCCUPIED, server_id=server_id)
        return updated == 1

    @staticmethod
    def mark_table_occupied(table_id, server_id=None):
        fields = {"status": Table.TableStatus.OCCUPIED}
        if server_id is not None:
            fields["server_id"] = server_id
        Table.objects.filter(pk=table_id).update(**fields)

    @staticmethod
    def release_table(table_id):
        Table.objects.filter(pk=table_id).update(
            status=Table.TableStatus.FREE, server=None
        )

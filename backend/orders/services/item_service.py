from django.db import transaction
import logging
from typing import Iterable, List

from orders.calculators import OrderTotals
from orders.exceptions import (
    InvalidOrderStateError,
    OrderNotFoundError,
    OrderValidationError,
)
from orders.grouping import normalize_ids
from orders.models import Order, OrderItem
from orders.store import OrderStore
from products.models import AddOn, Product

logger = logging.getLogger(__name__)


class OrderItemService:
    """
    Service for managing order items - adding, adjusting, removing, noting.

    Every mutation ends with a totals recompute inside the same transaction,
    so the persisted totals always match the persisted items.
    """

    @staticmethod
    def _require_mutable(order: Order, operation: str):
        if order.status not in Order.ACTIVE_STATUSES:
            raise InvalidOrderStateError(order.number, order.status, operation)

    @staticmethod
    def _recalculate(order_id) -> OrderTotals:
        from orders.services.calculation_service import OrderCalculationService

        return OrderCalculationService.recalculate_order_totals(order_id)

    @staticmethod
    def _item_for_update(item_id, operation: str, order_id=None) -> OrderItem:
        item = OrderStore.get_line_item(item_id, order_id=order_id)
        order = OrderStore.get_order(item.order_id, for_update=True)
        OrderItemService._require_mutable(order, operation)
        return item

    @staticmethod
    @transaction.atomic
    def add_product(order_id, product_id, add_on_ids: Iterable = (), note: str = "") -> OrderTotals:
        """
        Add one unit of a product at its current price.

        Add-ons must be active and allowed for the product; their current
        extra price is captured on the new line item.

        Raises:
            OrderNotFoundError: If the order, product or an add-on does not exist
            OrderValidationError: If the product is inactive or an add-on is not allowed
            InvalidOrderStateError: If the order is paid or voided
        """
        order = OrderStore.get_order(order_id, for_update=True)
        OrderItemService._require_mutable(order, "add items to")

        try:
            product = Product.objects.get(pk=product_id)
        except (Product.DoesNotExist, ValueError, TypeError):
            raise OrderNotFoundError("Product", product_id)
        if not product.is_active:
            raise OrderValidationError(f"Product '{product.name}' is not available")

        wanted = normalize_ids(add_on_ids)
        add_ons: List[AddOn] = list(AddOn.objects.filter(pk__in=wanted))
        found = {a.pk for a in add_ons}
        missing = [pk for pk in wanted if pk not in found]
        if missing:
            raise OrderNotFoundError("Add-on", missing[0])
        for add_on in add_ons:
            OrderItemService._validate_add_on(product, add_on)

        item_id = OrderStore.insert_line_item(
            order.pk,
            product.pk,
            product.price,
            add_ons=[(a.pk, a.extra_price) for a in add_ons],
            note=note,
        )
        logger.info(f"Added {product.name} (item {item_id}) to order {order.number}")
        return OrderItemService._recalculate(order.pk)

    @staticmethod
    @transaction.atomic
    def increment(item_id, order_id=None) -> OrderTotals:
        item = OrderItemService._item_for_update(item_id, "change items of", order_id)
        OrderStore.adjust_quantity(item.pk, +1)
        return OrderItemService._recalculate(item.order_id)

    @staticmethod
    @transaction.atomic
    def decrement(item_id, order_id=None) -> OrderTotals:
        """Remove one unit; at quantity 1 the item and its add-ons are deleted."""
        item = OrderItemService._item_for_update(item_id, "change items of", order_id)
        remaining = OrderStore.adjust_quantity(item.pk, -1)
        if remaining == 0:
            logger.info(f"Item {item.pk} removed from order {item.order_id} by decrement")
        return OrderItemService._recalculate(item.order_id)

    @staticmethod
    @transaction.atomic
    def remove_item(item_id, order_id=None) -> OrderTotals:
        item = OrderItemService._item_for_update(item_id, "remove items from", order_id)
        OrderStore.delete_line_item(item.pk)
        return OrderItemService._recalculate(item.order_id)

    @staticmethod
    @transaction.atomic
    def remove_group(order_id, item_ids: Iterable) -> OrderTotals:
        """
        Delete every line item of a display group.

        Ids that no longer exist are skipped, so a repeated request after a
        partial failure converges instead of erroring.
        """
        order = OrderStore.get_order(order_id, for_update=True)
        OrderItemService._require_mutable(order, "remove items from")

        ids = normalize_ids(item_ids)
        if not ids:
            raise OrderValidationError("item_ids is required")
        deleted, _ = OrderItem.objects.filter(order_id=order.pk, pk__in=ids).delete()
        logger.info(f"Removed group of {len(ids)} item(s) from order {order.number} ({deleted} rows)")
        return OrderItemService._recalculate(order.pk)

    @staticmethod
    @transaction.atomic
    def attach_add_on(item_id, add_on_id, order_id=None) -> OrderTotals:
        """Attach an add-on at its current price, or refresh the captured price if already attached."""
        item = OrderItemService._item_for_update(item_id, "change items of", order_id)
        try:
            add_on = AddOn.objects.get(pk=add_on_id)
        except (AddOn.DoesNotExist, ValueError, TypeError):
            raise OrderNotFoundError("Add-on", add_on_id)
        OrderItemService._validate_add_on(item.product, add_on)

        OrderStore.upsert_addon_attachment(item.pk, add_on.pk, add_on.extra_price)
        return OrderItemService._recalculate(item.order_id)

    @staticmethod
    @transaction.atomic
    def set_note(item_id, text, order_id=None) -> str:
        item = OrderItemService._item_for_update(item_id, "change items of", order_id)
        note = OrderStore.set_note(item.pk, text)
        OrderItemService._recalculate(item.order_id)
        return note

    @staticmethod
    @transaction.atomic
    def set_group_note(order_id, item_ids: Iterable, text) -> str:
        """Write the same note on every item of a display group."""
        order = OrderStore.get_order(order_id, for_update=True)
        OrderItemService._require_mutable(order, "change items of")

        ids = normalize_ids(item_ids)
        if not ids:
            raise OrderValidationError("item_ids is required")
        existing = list(
            OrderItem.objects.filter(order_id=order.pk, pk__in=ids).values_list("pk", flat=True)
        )
        if not existing:
            raise OrderNotFoundError("Line item", ids[0])

        note = ""
        for pk in existing:
            note = OrderStore.set_note(pk, text)
        OrderItemService._recalculate(order.pk)
        return note

    @staticmethod
    def _validate_add_on(product: Product, add_on: AddOn):
        if not add_on.is_active:
            raise OrderValidationError(f"Add-on '{add_on.name}' is not available")
        if not product.allowed_add_ons.filter(pk=add_on.pk).exists():
            raise OrderValidationError(
                f"Add-on '{add_on.name}' is not allowed for '{product.name}'"
            )

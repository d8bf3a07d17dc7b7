from dataclasses import dataclass
from django.db import IntegrityError, transaction
import logging

from orders.exceptions import InvalidOrderStateError, TableConflictError
from orders.models import Order, Table
from orders.store import OrderStore

logger = logging.getLogger(__name__)


@dataclass
class ClaimResult:
    order: Order
    created: bool


class OrderService:
    """Core service for order lifecycle management - claiming tables, sending, voiding, closing."""

    # Valid status transitions for order state machine
    VALID_STATUS_TRANSITIONS = {
        Order.OrderStatus.OPEN: [
            Order.OrderStatus.SENT,
            Order.OrderStatus.PAID,
            Order.OrderStatus.VOIDED,
        ],
        Order.OrderStatus.SENT: [
            Order.OrderStatus.PAID,
            Order.OrderStatus.VOIDED,
        ],
        Order.OrderStatus.PAID: [],
        Order.OrderStatus.VOIDED: [],
    }

    @staticmethod
    def can_transition(current_status, new_status) -> bool:
        return new_status in OrderService.VALID_STATUS_TRANSITIONS.get(current_status, [])

    @staticmethod
    def transition(order: Order, new_status, operation: str):
        """
        Move ``order`` to ``new_status`` or raise InvalidOrderStateError.
        The caller is expected to hold a row lock on the order.
        """
        if not OrderService.can_transition(order.status, new_status):
            raise InvalidOrderStateError(order.number, order.status, operation)
        OrderStore.set_order_state(order.pk, new_status)
        logger.info(f"Order {order.number}: {order.status} -> {new_status}")
        order.status = new_status

    @staticmethod
    def claim_table(table_id, server) -> ClaimResult:
        """
        Take a table for ``server`` and return its active order.

        If the table already has an open or sent order it is returned as is
        (a repeated claim is idempotent). Otherwise a single conditional
        update flips the table from FREE to OCCUPIED; when several servers
        race for the same free table exactly one update succeeds and the
        others get TableConflictError.

        Raises:
            OrderNotFoundError: If the table does not exist
            TableConflictError: If another server took the table first
        """
        table = OrderStore.get_table(table_id)
        server_id = server.pk if server is not None else None

        existing = OrderStore.find_active_order(table.pk)
        if existing is not None:
            OrderStore.mark_table_occupied(table.pk)
            logger.info(f"Table {table.number} already has order {existing.number}, reusing it")
            return ClaimResult(order=existing, created=False)

        try:
            with transaction.atomic():
                if not OrderStore.claim_table_atomic(table.pk, server_id):
                    raise TableConflictError(table.number)
                order = OrderStore.create_order(table.pk, server_id)
        except IntegrityError:
            # Another claim created the active order between our check and insert
            existing = OrderStore.find_active_order(table.pk)
            if existing is None:
                raise
            return ClaimResult(order=existing, created=False)

        logger.info(f"Table {table.number} claimed by user {server_id}, order {order.number} opened")
        return ClaimResult(order=order, created=True)

    @staticmethod
    @transaction.atomic
    def void_order(order_id) -> Order:
        """
        Void an open or sent order. The table is always freed and its server
        assignment cleared, whether or not the order has items.

        Raises:
            OrderNotFoundError: If the order does not exist
            InvalidOrderStateError: If the order is already paid or voided
        """
        order = OrderStore.get_order(order_id, for_update=True)
        OrderService.transition(order, Order.OrderStatus.VOIDED, "void")
        OrderStore.release_table(order.table_id)
        logger.info(f"Order {order.number} voided, table {order.table_id} released")
        return OrderStore.get_order(order.pk)

    @staticmethod
    @transaction.atomic
    def close_order(order_id) -> Order:
        """
        Dismiss an order from the server's screen. An empty order is voided
        (freeing the table); an order with items is left untouched.
        """
        order = OrderStore.get_order(order_id, for_update=True)
        if order.is_terminal:
            return order
        if not order.items.exists():
            return OrderService.void_order(order.pk)
        return order

    @staticmethod
    @transaction.atomic
    def mark_sent(order_id) -> bool:
        """OPEN -> SENT after kitchen tickets went out. Returns True when the status changed."""
        order = OrderStore.get_order(order_id, for_update=True)
        if order.status != Order.OrderStatus.OPEN:
            return False
        OrderService.transition(order, Order.OrderStatus.SENT, "send")
        return True

    @staticmethod
    def active_order_for_table(table_id):
        table: Table = OrderStore.get_table(table_id)
        return OrderStore.find_active_order(table.pk)

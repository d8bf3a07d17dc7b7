from decimal import Decimal
from django.db import transaction
import logging

from orders.calculators import OrderCalculator, OrderTotals, validate_percentage
from orders.exceptions import InvalidOrderStateError
from orders.store import OrderStore

logger = logging.getLogger(__name__)


class OrderCalculationService:
    """Service for computing and persisting order totals."""

    @staticmethod
    @transaction.atomic
    def recalculate_order_totals(order_id) -> OrderTotals:
        """
        Recompute subtotal, service charge and total from the current
        persisted line items and write them back on the order.

        Locks the order row so that two recomputes of the same order
        serialize. Always reads fresh rows: a stale decrement that arrives
        after a delete is corrected by the next recompute.

        Raises:
            OrderNotFoundError: If the order does not exist
        """
        order = OrderStore.get_order(order_id, for_update=True)
        rows = OrderStore.list_line_items(order.pk)

        totals = OrderCalculator(rows, order.service_percentage).calculate_totals()
        OrderStore.persist_totals(order.pk, totals)

        logger.debug(
            f"Order {order.number} totals: subtotal={totals.subtotal} "
            f"charge={totals.service_charge} ({totals.percentage}%) total={totals.total}"
        )
        return totals

    @staticmethod
    @transaction.atomic
    def set_service_percentage(order_id, percentage) -> OrderTotals:
        """
        Change the service percentage and recompute totals.

        The value is validated before anything is written, so a rejected
        percentage leaves the order untouched.

        Raises:
            OrderValidationError: If percentage is not a number in [0, 100]
            OrderNotFoundError: If the order does not exist
            InvalidOrderStateError: If the order is paid or voided
        """
        value: Decimal = validate_percentage(percentage)

        order = OrderStore.get_order(order_id, for_update=True)
        if order.is_terminal:
            raise InvalidOrderStateError(order.number, order.status, "change the service percentage of")

        OrderStore.set_service_percentage(order.pk, value)
        logger.info(f"Order {order.number} service percentage set to {value}%")
        return OrderCalculationService.recalculate_order_totals(order.pk)

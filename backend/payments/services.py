from decimal import Decimal, InvalidOperation
from django.conf import settings
from django.db import transaction
import logging

from orders.exceptions import InvalidOrderStateError, OrderValidationError
from orders.models import Order
from orders.services.calculation_service import OrderCalculationService
from orders.services.order_service import OrderService
from orders.store import OrderStore

from .models import Payment
from .money import quantize
from .signals import payment_completed

logger = logging.getLogger(__name__)


def parse_amount(value, field_name: str) -> Decimal:
    """Non-negative amount in the configured currency; empty means zero."""
    if value in (None, ""):
        return Decimal("0")
    if isinstance(value, bool):
        raise OrderValidationError(f"{field_name} must be a number")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise OrderValidationError(f"{field_name} must be a number")
    if not amount.is_finite() or amount < 0:
        raise OrderValidationError(f"{field_name} must be zero or positive")
    return quantize(getattr(settings, "CURRENCY", "CLP"), amount)


class PaymentService:
    """Settles orders. Printing kitchen tickets is a side effect queued after commit."""

    @staticmethod
    def pay(order_id, cash_amount=None, card_amount=None, cashier=None) -> Payment:
        """
        Record a payment, mark the order PAID and free its table.

        Totals are recomputed before the tendered amount is checked. Once the
        transaction commits, ``payment_completed`` is sent; its receivers
        queue kitchen ticket emission and can never undo the payment.

        Raises:
            OrderNotFoundError: If the order does not exist
            OrderValidationError: If the order is empty, amounts are invalid or insufficient
            InvalidOrderStateError: If the order is already paid or voided
        """
        cash = parse_amount(cash_amount, "cash_amount")
        card = parse_amount(card_amount, "card_amount")
        tendered = cash + card

        with transaction.atomic():
            order = OrderStore.get_order(order_id, for_update=True)
            if not OrderService.can_transition(order.status, Order.OrderStatus.PAID):
                raise InvalidOrderStateError(order.number, order.status, "pay")
            if not order.items.exists():
                raise OrderValidationError(f"Order #{order.number} has no items")

            totals = OrderCalculationService.recalculate_order_totals(order.pk)
            if tendered < totals.total:
                raise OrderValidationError(
                    f"Insufficient amount: {tendered} tendered, {totals.total} due",
                    details={"tendered": str(tendered), "total": str(totals.total)},
                )

            if cash and card:
                method = Payment.Method.MIXED
            elif card:
                method = Payment.Method.CARD
            else:
                method = Payment.Method.CASH

            payment = Payment.objects.create(
                order=order,
                cashier=cashier,
                method=method,
                amount_due=totals.total,
                cash_amount=cash,
                card_amount=card,
                tendered=tendered,
                change=tendered - totals.total,
            )
            OrderService.transition(order, Order.OrderStatus.PAID, "pay")
            OrderStore.release_table(order.table_id)

            transaction.on_commit(lambda: PaymentService._notify_completed(payment))

        logger.info(
            f"Order {order.number} paid: total={totals.total} tendered={tendered} "
            f"change={payment.change} ({method})"
        )
        return payment

    @staticmethod
    def _notify_completed(payment: Payment):
        for receiver, response in payment_completed.send_robust(sender=Payment, payment=payment):
            if isinstance(response, Exception):
                logger.error(f"payment_completed receiver {receiver} failed for order {payment.order_id}: {response}")

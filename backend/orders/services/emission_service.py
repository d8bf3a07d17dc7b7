from dataclasses import dataclass, field
from django.db import transaction
import logging
from typing import List, Optional

from core_backend.infrastructure.locks import EmissionLock
from orders.calculators import OrderTotals
from orders.exceptions import InvalidOrderStateError, OrderValidationError
from orders.models import Order
from orders.services.calculation_service import OrderCalculationService
from orders.services.kitchen_service import BILL, KITCHEN, KitchenService, TicketPayload
from orders.services.order_service import OrderService
from orders.store import OrderStore

logger = logging.getLogger(__name__)

TRIGGER_MANUAL = "manual"
TRIGGER_PAYMENT = "payment"


@dataclass
class ChannelResult:
    channel: str
    ok: bool = False
    reason: str = ""
    printer: Optional[str] = None
    print_job_id: Optional[int] = None
    kds_ticket_id: Optional[int] = None
    kds_error: str = ""
    skipped: bool = False

    def to_dict(self) -> dict:
        return {
            "channel": self.channel,
            "ok": self.ok,
            "reason": self.reason,
            "printer": self.printer,
            "print_job_id": self.print_job_id,
            "kds_ticket_id": self.kds_ticket_id,
            "kds_error": self.kds_error,
            "skipped": self.skipped,
        }


@dataclass
class EmissionResult:
    ok: bool
    deduplicated: bool = False
    channels: List[ChannelResult] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    totals: Optional[OrderTotals] = None

    @property
    def succeeded(self) -> List[str]:
        return [c.channel for c in self.channels if c.ok]

    @property
    def failed(self) -> List[str]:
        return [c.channel for c in self.channels if not c.ok]

    @property
    def partial(self) -> bool:
        return bool(self.succeeded) and bool(self.failed)

    def to_dict(self) -> dict:
        data = {
            "ok": self.ok,
            "deduplicated": self.deduplicated,
            "channels": [c.to_dict() for c in self.channels],
            "warnings": list(self.warnings),
        }
        if self.totals is not None:
            data["totals"] = self.totals.to_dict()
        return data


class TicketEmissionService:
    """
    Kitchen ticket and bill emission.

    Each emission takes a per-order lock first; a second request inside the
    lock window gets a deduplicated result and causes no side effects.
    Totals are recomputed before anything is built, and each channel is
    printed and mirrored independently so one failing printer never stops
    the others.
    """

    @staticmethod
    def emit_kitchen_tickets(order_id, trigger: str = TRIGGER_MANUAL) -> EmissionResult:
        """
        Print one ticket per channel and mirror allow-listed channels to KDS.

        Payment-triggered emissions skip channels whose identical ticket was
        already queued for the order, so paying after "send to kitchen" does
        not print the same ticket twice. A successful emission moves an OPEN
        order to SENT.

        Raises:
            OrderNotFoundError: If the order does not exist
            OrderValidationError: If the order has no items
            InvalidOrderStateError: If the order is voided, or paid and the trigger is manual
        """
        lock = EmissionLock(EmissionLock.KITCHEN)
        if not lock.try_acquire(order_id):
            logger.info(f"Kitchen emission for order {order_id} deduplicated ({trigger})")
            return EmissionResult(ok=True, deduplicated=True)

        try:
            order = OrderStore.get_order(order_id)
            if order.status == Order.OrderStatus.VOIDED or (
                order.status == Order.OrderStatus.PAID and trigger != TRIGGER_PAYMENT
            ):
                raise InvalidOrderStateError(order.number, order.status, "send kitchen tickets for")

            totals = OrderCalculationService.recalculate_order_totals(order.pk)
            payloads = KitchenService.build(order.pk, KITCHEN)
            if not payloads:
                raise OrderValidationError(f"Order #{order.number} has no items to send")

            results = [
                TicketEmissionService._emit_channel(payload, trigger, mirror=True)
                for payload in payloads
            ]
            result = EmissionResult(
                ok=all(r.ok for r in results), channels=results, totals=totals
            )

            if result.succeeded:
                OrderService.mark_sent(order.pk)
            TicketEmissionService._log_outcome(order, "kitchen", result)
            return result
        finally:
            lock.release(order_id)

    @staticmethod
    def print_bill(order_id, service_percentage=None) -> EmissionResult:
        """
        Print the bill (precuenta) on the cashier printer.

        A percentage sent along is applied first; if it is rejected the bill
        is still printed with the current percentage and the rejection is
        returned as a warning. Does not change the order status.

        Raises:
            OrderNotFoundError: If the order does not exist
            OrderValidationError: If the order has no items
            InvalidOrderStateError: If the order is paid or voided
        """
        lock = EmissionLock(EmissionLock.BILL)
        if not lock.try_acquire(order_id):
            logger.info(f"Bill print for order {order_id} deduplicated")
            return EmissionResult(ok=True, deduplicated=True)

        try:
            warnings = []
            if service_percentage is not None:
                try:
                    OrderCalculationService.set_service_percentage(order_id, service_percentage)
                except OrderValidationError as e:
                    logger.warning(f"Bill for order {order_id}: percentage update failed: {e}")
                    warnings.append(f"Service percentage not updated: {e}")

            order = OrderStore.get_order(order_id)
            if order.is_terminal:
                raise InvalidOrderStateError(order.number, order.status, "print the bill of")
            if not order.items.exists():
                raise OrderValidationError(f"Order #{order.number} has no items")

            totals = OrderCalculationService.recalculate_order_totals(order.pk)
            payload = KitchenService.build(order.pk, BILL, totals=totals)[0]
            channel_result = TicketEmissionService._emit_channel(payload, TRIGGER_MANUAL, mirror=False)

            result = EmissionResult(
                ok=channel_result.ok, channels=[channel_result], warnings=warnings, totals=totals
            )
            TicketEmissionService._log_outcome(order, "bill", result)
            return result
        finally:
            lock.release(order_id)

    @staticmethod
    def _emit_channel(payload: TicketPayload, trigger: str, mirror: bool) -> ChannelResult:
        from kds.services import KDSTicketService
        from printing.services import PrintJobSink

        result = ChannelResult(channel=payload.channel, printer=payload.printer_name)

        if trigger == TRIGGER_PAYMENT and PrintJobSink.already_queued(
            payload.header.order_id, payload.channel, payload.fingerprint
        ):
            result.ok = True
            result.skipped = True
            result.reason = "Identical ticket already sent"
            return result

        if payload.printer is None:
            result.reason = f"No printer assigned for channel {payload.channel}"
        else:
            try:
                with transaction.atomic():
                    job = PrintJobSink.submit(payload, trigger=trigger)
                result.ok = True
                result.print_job_id = job.pk
            except Exception as e:
                logger.exception(f"Print failed for channel {payload.channel}: {e}")
                result.reason = str(e) or e.__class__.__name__

        if mirror:
            try:
                ticket = KDSTicketService.mirror(payload)
                if ticket is not None:
                    result.kds_ticket_id = ticket.pk
            except Exception as e:
                logger.exception(f"KDS mirror failed for channel {payload.channel}: {e}")
                result.kds_error = str(e) or e.__class__.__name__

        return result

    @staticmethod
    def _log_outcome(order: Order, kind: str, result: EmissionResult):
        if result.ok:
            logger.info(f"Order {order.number}: {kind} emitted to {', '.join(result.succeeded)}")
        elif result.succeeded:
            logger.warning(
                f"Order {order.number}: {kind} partially emitted, "
                f"ok={result.succeeded} failed={result.failed}"
            )
        else:
            logger.error(f"Order {order.number}: {kind} emission failed on every channel {result.failed}")

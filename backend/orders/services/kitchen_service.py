from dataclasses import dataclass, field
from decimal import Decimal
from django.conf import settings
from django.utils import timezone
import hashlib
import json
import logging
from typing import List, Optional

from orders.calculators import OrderCalculator, OrderTotals
from orders.grouping import DisplayGroup, group_line_items, partition_by_channel
from orders.records import OrderHeader
from orders.store import OrderStore
from payments.money import format_amount
from settings.models import Printer
from settings.services import PrintRoutingService

logger = logging.getLogger(__name__)

BILL = "bill"
KITCHEN = "kitchen"


@dataclass
class TicketLine:
    quantity: int
    product_name: str
    note: str = ""
    add_ons: List[str] = field(default_factory=list)
    amount: Optional[Decimal] = None
    item_ids: List[int] = field(default_factory=list)

    @classmethod
    def from_group(cls, group: DisplayGroup, with_amount: bool) -> "TicketLine":
        return cls(
            quantity=group.quantity,
            product_name=group.product_name,
            note=group.note,
            add_ons=group.add_on_names,
            amount=group.amount if with_amount else None,
            item_ids=list(group.item_ids),
        )

    def to_dict(self) -> dict:
        data = {
            "quantity": self.quantity,
            "product_name": self.product_name,
            "note": self.note,
            "add_ons": list(self.add_ons),
        }
        if self.amount is not None:
            data["amount"] = str(self.amount)
        return data


@dataclass
class TicketPayload:
    kind: str
    channel: str
    header: OrderHeader
    lines: List[TicketLine]
    totals: Optional[OrderTotals] = None
    printer: Optional[Printer] = None
    printed_at: Optional[object] = None

    @property
    def printer_name(self) -> Optional[str]:
        return self.printer.name if self.printer else None

    @property
    def fingerprint(self) -> str:
        """Stable hash of what the ticket says, ignoring when it was built."""
        canonical = json.dumps(
            {
                "kind": self.kind,
                "channel": self.channel,
                "order": self.header.order_id,
                "lines": [line.to_dict() for line in self.lines],
                "totals": self.totals.to_dict() if self.totals else None,
            },
            sort_keys=True,
            ensure_ascii=False,
        )
        return hashlib.sha1(canonical.encode("utf-8")).hexdigest()

    def to_dict(self) -> dict:
        data = {
            "kind": self.kind,
            "channel": self.channel,
            "header": {
                "order_id": self.header.order_id,
                "order_number": self.header.number,
                "table_number": self.header.table_number,
                "server_name": self.header.server_name,
                "printed_at": self.printed_at.isoformat() if self.printed_at else None,
            },
            "lines": [line.to_dict() for line in self.lines],
            "printer": self.printer_name,
            "fingerprint": self.fingerprint,
        }
        if self.totals is not None:
            data["totals"] = self.totals.to_dict()
        data["text"] = KitchenService.format_ticket_text(self)
        return data


class KitchenService:
    """Ticket builder - turns an order's current rows into bill and kitchen ticket payloads."""

    @staticmethod
    def build(order_id, selector: str = KITCHEN, totals: Optional[OrderTotals] = None) -> List[TicketPayload]:
        """
        Build ticket payloads from freshly read order state.

        ``selector`` is ``"bill"`` for the cashier ticket, ``"kitchen"`` for
        one ticket per non-empty channel, or a channel name for that single
        channel. Kitchen lines carry no prices. Payloads are ordered by
        channel name.

        Raises:
            OrderNotFoundError: If the order does not exist
        """
        header = OrderStore.get_order_header(order_id)
        rows = OrderStore.list_line_items(order_id)
        printed_at = timezone.localtime()

        if selector == BILL:
            if totals is None:
                totals = OrderCalculator(rows, header.service_percentage).calculate_totals()
            channel = getattr(settings, "BILL_CHANNEL", "CAJA")
            return [
                TicketPayload(
                    kind=BILL,
                    channel=channel,
                    header=header,
                    lines=[TicketLine.from_group(g, with_amount=True) for g in group_line_items(rows)],
                    totals=totals,
                    printer=PrintRoutingService.resolve_printer(channel),
                    printed_at=printed_at,
                )
            ]

        partitions = partition_by_channel(rows)
        if selector != KITCHEN:
            wanted = selector.strip().upper()
            partitions = {name: part for name, part in partitions.items() if name == wanted}

        payloads = []
        for channel in sorted(partitions):
            groups = group_line_items(partitions[channel])
            if not groups:
                continue
            payloads.append(
                TicketPayload(
                    kind=KITCHEN,
                    channel=channel,
                    header=header,
                    lines=[TicketLine.from_group(g, with_amount=False) for g in groups],
                    printer=PrintRoutingService.resolve_printer(channel),
                    printed_at=printed_at,
                )
            )
        logger.debug(f"Built {len(payloads)} kitchen ticket(s) for order {header.number}")
        return payloads

    @staticmethod
    def format_ticket_text(payload: TicketPayload) -> str:
        """
        Plain-text rendering for 80mm thermal printers
        """
        currency = getattr(settings, "CURRENCY", "CLP")
        width = 42
        header = payload.header

        lines = []
        if payload.kind == BILL:
            lines.append("PRECUENTA".center(width))
        else:
            lines.append(f"COMANDA - {payload.channel}".center(width))
        lines.append(f"Mesa {header.table_number}   Pedido #{header.number}")
        if header.server_name:
            lines.append(f"Mesero: {header.server_name}")
        if payload.printed_at:
            fmt = getattr(settings, "TICKET_TIMESTAMP_FORMAT", "%d-%m-%Y %H:%M")
            lines.append(payload.printed_at.strftime(fmt))
        lines.append("=" * width)

        for line in payload.lines:
            label = f"{line.quantity}x {line.product_name.upper() if payload.kind == KITCHEN else line.product_name}"
            if line.amount is not None:
                price = format_amount(currency, line.amount)
                label = f"{label[:width - len(price) - 1]:<{width - len(price)}}{price}"
            lines.append(label)
            for add_on in line.add_ons:
                lines.append(f"  + {add_on}")
            if line.note:
                lines.append(f"  >> {line.note}")

        lines.append("=" * width)
        if payload.totals is not None:
            totals = payload.totals
            percentage = format(totals.percentage.normalize(), "f")
            for label, amount in (
                ("Subtotal", totals.subtotal),
                (f"Servicio {percentage}%", totals.service_charge),
                ("TOTAL", totals.total),
            ):
                price = format_amount(currency, amount)
                lines.append(f"{label:<{width - len(price)}}{price}")
        return "\n".join(lines)
